"""Workspace manifest loading."""
from __future__ import annotations

import json

import pytest

from e2elink.core.exceptions import ConfigCorruptionError, SettingsValidationError, WorkspaceError
from e2elink.core.modules.workspace import load_workspace
from helpers.io_utils import write_text, write_yaml


def test_reference_workspace_loads(reference_workspace) -> None:
    ws = load_workspace(reference_workspace.manifest)

    assert ws.repo_root == reference_workspace.root
    assert ws.host.name == "H"
    assert ws.host.is_host is True
    assert [d.name for d in ws.host.dependencies] == ["A", "B"]
    assert ws.get("A").dependencies == [ws.get("C")]
    assert ws.get("A").base_path == reference_workspace.base("A")
    assert ws.get("A").src_base_path == reference_workspace.base("A")
    assert ws.host.package_manifest["name"] == "shell"
    assert ws.host.build_config["compilerOptions"]["paths"] == {"@app/*": ["src/*"]}
    assert ws.get("B").plugin_settings == {}
    assert ws.get("C").plugin_settings == {"e2elink": [{"sharedHelperPath": "shared/index"}]}


def test_default_path_uses_repo_root(reference_workspace) -> None:
    ws = load_workspace(repo_root=reference_workspace.root)
    assert ws.path == reference_workspace.manifest


def test_src_base_path_resolves_against_repo_root(isolated_project_env) -> None:
    write_yaml(
        isolated_project_env / ".e2elink" / "workspace.yaml",
        {"modules": [{"name": "H", "package": "p", "basePath": "h", "srcBasePath": "h/src", "host": True}]},
    )
    ws = load_workspace(repo_root=isolated_project_env)
    assert ws.host.src_base_path == isolated_project_env / "h" / "src"


def test_settings_are_stored_under_plugin_name(reference_workspace) -> None:
    ws = load_workspace(reference_workspace.manifest, plugin_name="e2e")
    assert "e2e" in ws.get("A").plugin_settings


def test_missing_manifest(isolated_project_env) -> None:
    with pytest.raises(WorkspaceError, match="not found"):
        load_workspace(repo_root=isolated_project_env)


def test_schema_violation(isolated_project_env) -> None:
    manifest = isolated_project_env / ".e2elink" / "workspace.yaml"
    write_yaml(manifest, {"modules": [{"name": "H", "basePath": "h"}]})

    with pytest.raises(WorkspaceError, match="package") as exc:
        load_workspace(manifest)
    assert exc.value.context["errors"]


def test_unknown_dependency(isolated_project_env) -> None:
    manifest = isolated_project_env / ".e2elink" / "workspace.yaml"
    write_yaml(
        manifest,
        {"modules": [{"name": "H", "package": "p", "basePath": "h", "host": True, "dependencies": ["X"]}]},
    )

    with pytest.raises(WorkspaceError, match="unknown module 'X'"):
        load_workspace(manifest)


def test_duplicate_module(isolated_project_env) -> None:
    manifest = isolated_project_env / ".e2elink" / "workspace.yaml"
    entry = {"name": "H", "package": "p", "basePath": "h", "host": True}
    write_yaml(manifest, {"modules": [entry, entry]})

    with pytest.raises(WorkspaceError, match="Duplicate"):
        load_workspace(manifest)


@pytest.mark.parametrize("hosts", [0, 2])
def test_exactly_one_host(isolated_project_env, hosts: int) -> None:
    manifest = isolated_project_env / ".e2elink" / "workspace.yaml"
    modules = [
        {"name": f"M{i}", "package": "p", "basePath": f"m{i}", "host": i < hosts}
        for i in range(2)
    ]
    write_yaml(manifest, {"modules": modules})

    with pytest.raises(WorkspaceError, match="exactly one host"):
        load_workspace(manifest)


def test_invalid_settings_record(isolated_project_env) -> None:
    manifest = isolated_project_env / ".e2elink" / "workspace.yaml"
    write_yaml(
        manifest,
        {
            "modules": [
                {"name": "H", "package": "p", "basePath": "h", "host": True, "settings": {"testDir": "specs"}}
            ]
        },
    )

    with pytest.raises(SettingsValidationError) as exc:
        load_workspace(manifest)
    assert exc.value.context["module"] == "H"


def test_corrupt_package_manifest(reference_workspace) -> None:
    write_text(reference_workspace.base("H") / "package.json", "{not json")

    with pytest.raises(ConfigCorruptionError):
        load_workspace(reference_workspace.manifest)


def test_undecodable_build_config(reference_workspace) -> None:
    (reference_workspace.base("H") / "tsconfig.json").write_bytes(b'{"compilerOptions": {"\xff": 1}}')

    with pytest.raises(ConfigCorruptionError) as exc:
        load_workspace(reference_workspace.manifest)
    assert exc.value.context["path"].endswith("tsconfig.json")


class TestSaveManifests:
    def test_unchanged_manifests_are_not_written(self, reference_workspace) -> None:
        ws = load_workspace(reference_workspace.manifest)
        assert ws.save_manifests() == []
        assert not (reference_workspace.base("A") / "package.json").exists()

    def test_changed_manifest_is_written_once(self, reference_workspace) -> None:
        ws = load_workspace(reference_workspace.manifest)
        ws.host.package_manifest.setdefault("devDependencies", {})["ts-node"] = "^10.2.1"

        written = ws.save_manifests()

        target = reference_workspace.base("H") / "package.json"
        assert written == [target]
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["devDependencies"] == {"ts-node": "^10.2.1", "typescript": "~4.0.0"}
        assert ws.save_manifests() == []

    def test_key_order_of_manifest_is_kept(self, reference_workspace) -> None:
        target = reference_workspace.base("H") / "package.json"
        target.write_text(
            '{"name": "shell", "version": "1.0.0", "scripts": {"z": "zz", "a": "aa"}}\n', encoding="utf-8"
        )
        ws = load_workspace(reference_workspace.manifest)
        ws.host.package_manifest.setdefault("devDependencies", {})["ts-node"] = "^10.2.1"

        ws.save_manifests()

        data = json.loads(target.read_text(encoding="utf-8"))
        assert list(data) == ["name", "version", "scripts", "devDependencies"]
        assert list(data["scripts"]) == ["z", "a"]
