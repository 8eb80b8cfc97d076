import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'e2elink' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_e2elink_caches


@pytest.fixture(autouse=True)
def _reset_global_state(monkeypatch):
    """Fresh caches, log handlers and E2ELINK_* environment for each test."""
    for key in list(os.environ):
        if key.startswith("E2ELINK_"):
            monkeypatch.delenv(key, raising=False)
    reset_e2elink_caches()
    yield
    reset_e2elink_caches()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """
    Isolated project root with an empty ``.e2elink/config`` directory.

    The project root is pinned through E2ELINK_PROJECT_ROOT and the working
    directory is moved into it.
    """
    monkeypatch.setenv("E2ELINK_PROJECT_ROOT", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".e2elink" / "config").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture
def reference_workspace(isolated_project_env):
    """Host H -> A, B; A -> C, laid out on disk with a workspace manifest."""
    from helpers.workspace import build_reference_workspace

    return build_reference_workspace(isolated_project_env)


@pytest.fixture
def composition_config(isolated_project_env):
    from e2elink.core.config.domains import CompositionConfig

    return CompositionConfig(repo_root=isolated_project_env)


@pytest.fixture
def runner_config(isolated_project_env):
    from e2elink.core.config.domains import RunnerConfig

    return RunnerConfig(repo_root=isolated_project_env)
