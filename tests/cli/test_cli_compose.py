"""compose run / clean / deps through the CLI entry point."""
from __future__ import annotations

import json

import pytest

from e2elink.cli._dispatcher import main
from helpers.io_utils import read_json, write_text, write_yaml

MARKER = "[e2elink] This property was generated by e2elink"


def _run(capsys, *argv: str):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_compose_run_json(reference_workspace, capsys) -> None:
    root = reference_workspace.root

    code, out, _ = _run(capsys, "compose", "run", "--json", "--repo-root", str(root))

    assert code == 0
    payload = json.loads(out)
    assert payload["status"] == "success"
    assert payload["host"] == "H"
    assert payload["modules"] == ["C", "A", "B", "H"]
    assert payload["aliases"]["H"] == {
        "@pkgA/A/test": ["test/pkgA/A/helpers/index", MARKER],
        "@pkgC/C/test": ["test/pkgC/C/shared/index", MARKER],
    }
    assert set(payload["aliases"]) == {"A", "H"}
    [report] = payload["reports"]
    assert {link["status"] for link in report["links"]} == {"linked"}
    assert str(reference_workspace.base("H") / "package.json") in payload["manifests"]


def test_compose_run_text(reference_workspace, capsys) -> None:
    code, out, _ = _run(capsys, "compose", "run", "--repo-root", str(reference_workspace.root))

    assert code == 0
    assert out.startswith("Composed 4 module(s) for host H")
    assert "linked" in out


def test_compose_run_writes_package_manifest(reference_workspace, capsys) -> None:
    _run(capsys, "compose", "run", "--repo-root", str(reference_workspace.root))

    manifest = read_json(reference_workspace.base("H") / "package.json")
    assert manifest["name"] == "shell"
    assert manifest["devDependencies"]["typescript"] == "~4.3.5"
    assert manifest["devDependencies"]["@playwright/test"] == "^1.14.1"


def test_compose_run_reports_degraded_links(isolated_project_env, capsys) -> None:
    # C's package is named like module A, so its helper link would sit inside A's test-dir link.
    root = isolated_project_env
    write_text(root / "A" / "specs" / "a.spec.ts", "x")
    write_text(root / "C" / "shared" / "index.ts", "x")
    write_yaml(
        root / ".e2elink" / "workspace.yaml",
        {
            "modules": [
                {"name": "H", "package": "shell", "basePath": "H", "host": True, "dependencies": ["A"]},
                {"name": "A", "package": "pkgA", "basePath": "A", "dependencies": ["C"],
                 "settings": {"testDirectoryPath": "specs"}},
                {"name": "C", "package": "A", "basePath": "C", "settings": {"sharedHelperPath": "shared/index"}},
            ]
        },
    )

    code, out, _ = _run(capsys, "compose", "run", "--json", "--repo-root", str(root))

    assert code == 0
    payload = json.loads(out)
    assert payload["status"] == "degraded"
    statuses = {link["kind"]: link["status"] for link in payload["reports"][0]["links"]}
    assert statuses == {"test-dir": "linked", "shared-helper": "failed"}
    assert not (root / "A" / "specs" / "C").exists()



def test_compose_run_without_workspace(isolated_project_env, capsys) -> None:
    code, _, err = _run(capsys, "compose", "run", "--json", "--repo-root", str(isolated_project_env))

    assert code == 1
    assert json.loads(err)["error"] == "compose_error"


def test_compose_run_rejects_cycles(isolated_project_env, capsys) -> None:
    write_yaml(
        isolated_project_env / ".e2elink" / "workspace.yaml",
        {
            "modules": [
                {"name": "H", "package": "shell", "basePath": "H", "host": True, "dependencies": ["A"]},
                {"name": "A", "package": "pkgA", "basePath": "A", "dependencies": ["B"],
                 "settings": {"testDirectoryPath": "specs"}},
                {"name": "B", "package": "pkgB", "basePath": "B", "dependencies": ["A"]},
            ]
        },
    )

    code, _, err = _run(capsys, "compose", "run", "--json", "--repo-root", str(isolated_project_env))

    assert code == 1
    payload = json.loads(err)
    assert payload["error"] == "compose_error"
    assert payload["context"]["cycle"] == ["A", "B", "A"]


def test_compose_clean(reference_workspace, capsys) -> None:
    root = str(reference_workspace.root)
    _run(capsys, "compose", "run", "--repo-root", root)

    code, out, _ = _run(capsys, "compose", "clean", "--json", "--repo-root", root)

    assert code == 0
    removed = json.loads(out)["removed"]
    assert str(reference_workspace.base("H") / "test" / "A") in removed
    assert list((reference_workspace.base("H") / "test").iterdir()) == []
    assert (reference_workspace.base("A") / "specs" / "login.spec.ts").exists()


@pytest.mark.parametrize(
    "argv, expected",
    [
        ((), ["A", "C"]),
        (("A",), ["C"]),
        (("B",), []),
    ],
)
def test_compose_deps(reference_workspace, capsys, argv, expected) -> None:
    code, out, _ = _run(
        capsys, "compose", "deps", *argv, "--json", "--repo-root", str(reference_workspace.root)
    )

    assert code == 0
    assert [d["name"] for d in json.loads(out)["dependencies"]] == expected


def test_compose_deps_unknown_module(reference_workspace, capsys) -> None:
    code, _, err = _run(
        capsys, "compose", "deps", "Z", "--json", "--repo-root", str(reference_workspace.root)
    )

    assert code == 1
    payload = json.loads(err)
    assert payload["error"] == "deps_error"
    assert payload["context"]["known"] == ["A", "B", "C", "H"]
