"""Test asset composition: directory links and generated configuration."""
from __future__ import annotations

from .aliases import apply_path_aliases, build_alias_entries
from .linker import (
    AssetLinker,
    plan_shared_helper_links,
    plan_test_dir_links,
    split_helper_path,
)
from .synthesizer import ConfigSynthesizer
from .templates import TemplateStore

__all__ = [
    "AssetLinker",
    "ConfigSynthesizer",
    "TemplateStore",
    "apply_path_aliases",
    "build_alias_entries",
    "plan_shared_helper_links",
    "plan_test_dir_links",
    "split_helper_path",
]
