"""Load SlotcConfig from slotc.yaml / slotc.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from pathlib import Path

import yaml

from slotc._errors import ConfigError
from slotc.config import SlotcConfig

_CONFIG_NAMES = ("slotc.yaml", "slotc.yml", "slotc.toml")

_KNOWN_KEYS = frozenset({
    "source",
    "output",
    "layout",
    "slot_attr",
    "mode_attr",
    "provider_attr",
    "debounce_ms",
    "ignore_suffixes",
    "strip_slot_attributes",
    "verbose",
})


def load_config(project_root: Path, **overrides: object) -> SlotcConfig:
    """Load SlotcConfig for *project_root*, optionally merging a config file.

    Looks for slotc.yaml, slotc.yml, or slotc.toml in *project_root*. Relative
    ``source`` / ``output`` values from the file are resolved against the
    project root, as are the ``src`` / ``dist`` defaults. Overrides whose
    value is None are ignored so that unset CLI flags do not mask file
    settings.

    Raises:
        ConfigError: If the config file exists but cannot be parsed.

    """
    file_config = _read_slotc_config(project_root)
    for key in ("source", "output"):
        if key in file_config:
            path = Path(str(file_config[key]))
            file_config[key] = path if path.is_absolute() else project_root / path

    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    for key, default in (("source", "src"), ("output", "dist")):
        value = merged.get(key, project_root / default)
        merged[key] = value if isinstance(value, Path) else Path(str(value))
    if "ignore_suffixes" in merged:
        suffixes = merged["ignore_suffixes"]
        if isinstance(suffixes, str):
            suffixes = [suffixes]
        merged["ignore_suffixes"] = tuple(str(s) for s in suffixes)  # type: ignore[union-attr]
    if "debounce_ms" in merged:
        try:
            merged["debounce_ms"] = int(merged["debounce_ms"])  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            msg = f"debounce_ms must be an integer, got {merged['debounce_ms']!r}"
            raise ConfigError(msg) from exc

    return SlotcConfig(**merged)  # type: ignore[arg-type]


def find_config_file(project_root: Path) -> Path | None:
    """Return the first config file present in *project_root*, if any."""
    for name in _CONFIG_NAMES:
        path = project_root / name
        if path.is_file():
            return path
    return None


def _read_slotc_config(project_root: Path) -> dict[str, object]:
    """Read slotc config from yaml/toml if present. Returns empty dict otherwise."""
    path = find_config_file(project_root)
    if path is None:
        return {}
    if path.suffix == ".toml":
        return _parse_toml(path)
    return _parse_yaml(path)


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping at the top level"
        raise ConfigError(msg)
    return _flatten_slotc_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_slotc_section(data)


def _flatten_slotc_section(data: dict[str, object]) -> dict[str, object]:
    """Extract slotc.* keys into top-level config, dropping unknown keys."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k != "slotc" and k in _KNOWN_KEYS:
            result[k] = v
    section = data.get("slotc")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    return result
