"""Layered TOML configuration with typed dataclass mapping.

Priority stack (highest wins):
    1. Hardcoded defaults (SyncdocConfig())
    2. config/default.toml (bundled)
    3. ~/.config/syncdoc/config.toml (user config)
    4. ./syncdoc.toml (project config, or an explicit --config path)
    5. CLI overrides (dot-notation)
"""

from __future__ import annotations

import tomllib
from dataclasses import asdict, dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

from syncdoc.diff.lines import DocMarkers

PROJECT_CONFIG_NAME = "syncdoc.toml"

# ---------------------------------------------------------------------------
# Typed config tree: frozen, slotted dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GeneralConfig:
    """Top-level general settings."""

    log_level: str = "warning"
    max_workers: int = 4


@dataclass(frozen=True, slots=True)
class FormatterConfig:
    """Canonical formatter subprocess settings."""

    command: str = "rustfmt"
    args: tuple[str, ...] = ("--emit=stdout",)
    edition: str = "2021"
    timeout_seconds: float = 30.0


@dataclass(frozen=True, slots=True)
class MarkersConfig:
    """Names of the external-doc attribute and module-doc macro."""

    reference_marker: str = "omnidoc"
    module_doc_macro: str = "module_doc"

    def to_markers(self) -> DocMarkers:
        return DocMarkers(
            reference_marker=self.reference_marker,
            module_doc_macro=self.module_doc_macro,
        )


@dataclass(frozen=True, slots=True)
class MergeConfig:
    """Merge engine switches."""

    split_mixed_hunks: bool = True
    reformat_bookends: bool = True


@dataclass(frozen=True, slots=True)
class BatchConfig:
    """Directory batch settings."""

    extensions: tuple[str, ...] = (".rs",)
    fail_fast: bool = False


@dataclass(frozen=True, slots=True)
class SyncdocConfig:
    """Root configuration node."""

    general: GeneralConfig = field(default_factory=GeneralConfig)
    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    markers: MarkersConfig = field(default_factory=MarkersConfig)
    merge: MergeConfig = field(default_factory=MergeConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Config loading helpers
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Lists replace, dicts recurse."""
    merged = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _coerce_value(s: str) -> bool | int | float | str | list[str]:
    """Coerce a CLI string value to its typed equivalent.

    Comma-separated values become lists (``batch.extensions=.rs,.rs.in``).
    """
    if s.lower() == "true":
        return True
    if s.lower() == "false":
        return False
    try:
        return int(s)
    except ValueError:
        pass
    try:
        return float(s)
    except ValueError:
        pass
    if "," in s:
        return [part.strip() for part in s.split(",") if part.strip()]
    return s


def _apply_dot_override(raw: dict[str, Any], dot_key: str, str_value: str) -> None:
    """Apply a dot-notation CLI override into the raw config dict.

    Example: _apply_dot_override(raw, "formatter.edition", "2024")
    sets raw["formatter"]["edition"] = 2024
    """
    parts = dot_key.split(".")
    target = raw
    for part in parts[:-1]:
        if part not in target:
            target[part] = {}
        target = target[part]
    target[parts[-1]] = _coerce_value(str_value)


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file, returning empty dict if not found."""
    if not path.is_file():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


def _load_bundled_toml(filename: str) -> dict[str, Any]:
    """Load a TOML file bundled in the config/ directory relative to project root."""
    # Walk up from this file to find the project root containing config/
    current = Path(__file__).resolve().parent
    for _ in range(5):
        config_path = current / "config" / filename
        if config_path.is_file():
            with open(config_path, "rb") as f:
                return tomllib.load(f)
        current = current.parent

    # Fallback: try importlib.resources for installed packages
    try:
        config_pkg = resources.files("syncdoc").joinpath(f"../../config/{filename}")
        if hasattr(config_pkg, "read_bytes"):
            data = config_pkg.read_bytes()
            return tomllib.loads(data.decode("utf-8"))
    except (FileNotFoundError, TypeError):
        pass

    return {}


def _lists_to_tuples(data: dict[str, Any]) -> dict[str, Any]:
    """Convert lists to tuples in config dicts (for frozen dataclass compatibility)."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            result[key] = _lists_to_tuples(value)
        elif isinstance(value, list):
            result[key] = tuple(value)
        else:
            result[key] = value
    return result


def _build_config(raw: dict[str, Any]) -> SyncdocConfig:
    """Map a merged raw dict to the typed SyncdocConfig tree."""
    raw = _lists_to_tuples(raw)

    formatter_raw = dict(raw.get("formatter", {}))
    # TOML integers ("edition = 2021") are accepted as strings
    if "edition" in formatter_raw:
        formatter_raw["edition"] = str(formatter_raw["edition"])
    if isinstance(formatter_raw.get("args"), str):
        formatter_raw["args"] = (formatter_raw["args"],)

    batch_raw = dict(raw.get("batch", {}))
    if isinstance(batch_raw.get("extensions"), str):
        batch_raw["extensions"] = (batch_raw["extensions"],)

    return SyncdocConfig(
        general=GeneralConfig(**raw.get("general", {})),
        formatter=FormatterConfig(**formatter_raw),
        markers=MarkersConfig(**raw.get("markers", {})),
        merge=MergeConfig(**raw.get("merge", {})),
        batch=BatchConfig(**batch_raw),
    )


def load_config(
    config_path: Path | None = None,
    user_config_path: Path | None = None,
    cli_overrides: dict[str, str] | None = None,
) -> SyncdocConfig:
    """Load configuration with 5-layer priority stack.

    Args:
        config_path: Project config TOML. Defaults to ./syncdoc.toml.
        user_config_path: Path to user config TOML. Defaults to
            ~/.config/syncdoc/config.toml.
        cli_overrides: Dot-notation key→value pairs from CLI flags.

    Returns:
        Fully resolved, typed SyncdocConfig.

    Raises:
        TypeError: If a config file names a key that does not exist.
    """
    # Layer 1: hardcoded defaults (implicit via dataclass defaults)
    # Layer 2: bundled default.toml
    raw = _load_bundled_toml("default.toml")

    # Layer 3: user config
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "syncdoc" / "config.toml"
    raw = _deep_merge(raw, _load_toml_file(user_config_path))

    # Layer 4: project config
    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_NAME
    raw = _deep_merge(raw, _load_toml_file(config_path))

    # Layer 5: CLI overrides
    if cli_overrides:
        for dot_key, str_value in cli_overrides.items():
            _apply_dot_override(raw, dot_key, str_value)

    return _build_config(raw)
