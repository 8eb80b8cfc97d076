"""Path-alias generation and merge-without-clobber."""
from __future__ import annotations

from pathlib import Path

from e2elink.core.composition import apply_path_aliases, build_alias_entries
from helpers.workspace import make_module

MARKER = "[e2elink] This property was generated by e2elink"


def _members():
    c = make_module("C", settings={"sharedHelperPath": "shared/index"})
    a = make_module("A", deps=[c], settings={"testDirectoryPath": "specs", "sharedHelperPath": "helpers/index"})
    return [a, c]


class TestBuildAliasEntries:
    def test_host_paths_are_relative_to_host_test_root(self, composition_config) -> None:
        host = make_module("H", host=True)

        entries = build_alias_entries(host, _members(), composition_config)

        assert entries == {
            "@pkgA/A/test": ["test/pkgA/A/helpers/index", MARKER],
            "@pkgC/C/test": ["test/pkgC/C/shared/index", MARKER],
        }

    def test_non_host_paths_use_private_root(self, composition_config) -> None:
        module = make_module("M", base=Path("/ws/M"))
        module.src_base_path = Path("/ws/M/src")

        entries = build_alias_entries(module, _members(), composition_config)

        assert entries["@pkgC/C/test"] == ["/ws/M/src/.e2elink/test/pkgC/C/shared/index", MARKER]

    def test_custom_alias_name(self, composition_config) -> None:
        member = make_module(
            "A", settings={"sharedHelperPath": "helpers/index", "sharedHelperAliasName": "@shared/a"}
        )
        entries = build_alias_entries(make_module("H", host=True), [member], composition_config)
        assert list(entries) == ["@shared/a"]

    def test_members_without_helper_have_no_alias(self, composition_config) -> None:
        member = make_module("A", settings={"testDirectoryPath": "specs"})
        assert build_alias_entries(make_module("H", host=True), [member], composition_config) == {}


class TestApplyPathAliases:
    def test_creates_paths_section(self) -> None:
        document: dict = {}
        apply_path_aliases(document, {"@p/m/test": ["x", MARKER]}, MARKER)
        assert document == {"compilerOptions": {"paths": {"@p/m/test": ["x", MARKER]}}}

    def test_hand_written_entries_survive(self) -> None:
        document = {
            "compilerOptions": {
                "baseUrl": "./",
                "paths": {
                    "@app/*": ["src/*"],
                    "@old/Gone/test": ["test/old", MARKER],
                },
            }
        }

        apply_path_aliases(document, {"@pkgA/A/test": ["test/pkgA/A/helpers/index", MARKER]}, MARKER)

        assert document["compilerOptions"] == {
            "baseUrl": "./",
            "paths": {
                "@app/*": ["src/*"],
                "@pkgA/A/test": ["test/pkgA/A/helpers/index", MARKER],
            },
        }

    def test_reapplying_is_stable(self) -> None:
        entries = {"@pkgA/A/test": ["p", MARKER]}
        document: dict = {"compilerOptions": {"paths": {"@app/*": ["src/*"]}}}

        apply_path_aliases(document, entries, MARKER)
        first = {k: list(v) for k, v in document["compilerOptions"]["paths"].items()}
        apply_path_aliases(document, entries, MARKER)

        assert document["compilerOptions"]["paths"] == first
