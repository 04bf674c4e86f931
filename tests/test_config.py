"""Tests for webmap.config."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from webmap.config import (
    DEFAULT_EXCLUDE_DIRS,
    ConfigError,
    Limits,
    WebmapConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, WebmapConfig)
    assert config.root == tmp_path.resolve()
    assert config.scan.exclude_dirs == list(DEFAULT_EXCLUDE_DIRS)
    assert config.scan.include_dotfiles is False
    assert config.scan.read_concurrency == 8
    assert config.analyzers.enabled == []
    assert config.limits == Limits()
    assert config.manifest == "package.json"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".webmap.yml").write_text(
        """
scan:
  exclude_dirs:
    - node_modules
    - "coverage*"
  include_dotfiles: true
  read_concurrency: 2
analyzers:
  enabled: [analyze_project, get_components]
limits:
  component_files: 5
  top_classes: "12"
  unknown_limit: 3
  routes: -1
manifest: web/package.json
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path / ".webmap.yml")

    assert config.scan.exclude_dirs == ["node_modules", "coverage*"]
    assert config.scan.include_dotfiles is True
    assert config.scan.read_concurrency == 2
    assert config.analyzers.enabled == ["analyze_project", "get_components"]
    assert config.limits.component_files == 5
    assert config.limits.top_classes == 12
    assert config.limits.routes == Limits().routes
    assert config.manifest == "web/package.json"


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".webmap.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path).limits == Limits()


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".webmap.yml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_wraps_yaml_errors(tmp_path: Path) -> None:
    (tmp_path / ".webmap.yml").write_text("scan: [unterminated\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(tmp_path)


_NO_PERMISSIONS = pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="permission bits are not enforced for root",
)


@_NO_PERMISSIONS
def test_load_config_falls_back_to_defaults_for_unreadable_root(tmp_path: Path) -> None:
    root = tmp_path / "locked"
    root.mkdir()
    root.chmod(0)
    try:
        config = load_config(root / ".webmap.yml")
    finally:
        root.chmod(0o755)

    assert config.root == root
    assert config.limits == Limits()


@_NO_PERMISSIONS
def test_load_config_wraps_unreadable_file(tmp_path: Path) -> None:
    config_file = tmp_path / ".webmap.yml"
    config_file.write_text("scan: {}\n", encoding="utf-8")
    config_file.chmod(0)
    try:
        with pytest.raises(ConfigError):
            load_config(tmp_path)
    finally:
        config_file.chmod(0o644)
