"""Tests for slotc.config and slotc.config_loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from slotc._errors import ConfigError
from slotc.config import SlotcConfig
from slotc.config_loader import find_config_file, load_config


class TestSlotcConfig:
    """SlotcConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = SlotcConfig()
        assert config.layout == "_layout.html"
        assert config.slot_attr == "slot"
        assert config.mode_attr == "slot-mode"
        assert config.provider_attr == "for-slot"
        assert config.debounce_ms == 150
        assert config.ignore_suffixes == (".tmp",)
        assert config.strip_slot_attributes is True
        assert config.verbose is True

    def test_frozen(self) -> None:
        config = SlotcConfig()
        with pytest.raises(AttributeError):
            config.layout = "base.html"  # type: ignore[misc]

    def test_relative_paths_resolved_to_absolute(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        config = SlotcConfig()
        assert config.source == tmp_path.resolve() / "src"
        assert config.output == tmp_path.resolve() / "dist"

    def test_absolute_paths_unchanged(self, tmp_path: Path) -> None:
        config = SlotcConfig(source=tmp_path / "site", output=tmp_path / "out")
        assert config.source == tmp_path / "site"
        assert config.layout_path == tmp_path / "site" / "_layout.html"

    def test_debounce_seconds(self) -> None:
        assert SlotcConfig(debounce_ms=250).debounce_seconds == 0.25

    def test_is_layout_case_insensitive(self, tmp_path: Path) -> None:
        config = SlotcConfig(source=tmp_path)
        assert config.is_layout(tmp_path / "_LAYOUT.html")
        assert not config.is_layout(tmp_path / "sub" / "_layout.html")
        assert not config.is_layout(tmp_path / "index.html")

    def test_in_output(self, tmp_path: Path) -> None:
        config = SlotcConfig(source=tmp_path, output=tmp_path / "dist")
        assert config.in_output(tmp_path / "dist")
        assert config.in_output(tmp_path / "dist" / "css" / "a.css")
        assert not config.in_output(tmp_path / "distant.css")


class TestLoadConfig:
    """load_config — config files and override precedence."""

    def test_no_file_uses_defaults_under_project_root(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.source == tmp_path / "src"
        assert config.output == tmp_path / "dist"
        assert config.layout == "_layout.html"

    def test_yaml_file(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.yaml").write_text(
            "source: site\noutput: public\nlayout: base.html\ndebounce_ms: 300\n"
        )
        config = load_config(tmp_path)
        assert config.source == tmp_path / "site"
        assert config.output == tmp_path / "public"
        assert config.layout == "base.html"
        assert config.debounce_ms == 300

    def test_yaml_slotc_section(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.yml").write_text(
            "slotc:\n  strip_slot_attributes: false\n  ignore_suffixes: .swp\n"
            "unrelated: 1\n"
        )
        config = load_config(tmp_path)
        assert config.strip_slot_attributes is False
        assert config.ignore_suffixes == (".swp",)

    def test_toml_file(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.toml").write_text(
            '[slotc]\nprovider_attr = "data-for"\nignore_suffixes = [".tmp", "~"]\n'
        )
        config = load_config(tmp_path)
        assert config.provider_attr == "data-for"
        assert config.ignore_suffixes == (".tmp", "~")

    def test_yaml_wins_over_toml(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.yaml").write_text("layout: from-yaml.html\n")
        (tmp_path / "slotc.toml").write_text('layout = "from-toml.html"\n')
        assert find_config_file(tmp_path) == tmp_path / "slotc.yaml"
        assert load_config(tmp_path).layout == "from-yaml.html"

    def test_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.yaml").write_text("layout: base.html\nverbose: true\n")
        config = load_config(tmp_path, layout="other.html", verbose=False)
        assert config.layout == "other.html"
        assert config.verbose is False

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.yaml").write_text("source: site\n")
        config = load_config(tmp_path, source=None, layout=None)
        assert config.source == tmp_path / "site"
        assert config.layout == "_layout.html"

    def test_absolute_source_in_file(self, tmp_path: Path) -> None:
        elsewhere = tmp_path / "elsewhere"
        (tmp_path / "slotc.yaml").write_text(f"source: {elsewhere}\n")
        assert load_config(tmp_path).source == elsewhere


class TestConfigErrors:
    def test_malformed_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.yaml").write_text("source: [unclosed\n")
        with pytest.raises(ConfigError, match="slotc.yaml"):
            load_config(tmp_path)

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(tmp_path)

    def test_malformed_toml(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.toml").write_text("layout = \n")
        with pytest.raises(ConfigError, match="slotc.toml"):
            load_config(tmp_path)

    def test_bad_debounce(self, tmp_path: Path) -> None:
        (tmp_path / "slotc.yaml").write_text("debounce_ms: soon\n")
        with pytest.raises(ConfigError, match="debounce_ms"):
            load_config(tmp_path)
