"""YAML-backed configuration for the Portable Text formatter."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from pt_structure.exceptions import ConfigError


@dataclass(frozen=True)
class FormatterConfig:
    """Options recognised by the formatter core."""

    allow_empty_blocks: bool = False


@dataclass
class OutputConfig:
    """Input/output handling for the pipeline."""

    indent: int = 2
    field: Optional[str] = None  # document key holding the block array, e.g. "body"


# Accepted YAML types per option; None means the option may be null.
_OPTION_TYPES: dict[str, dict[str, tuple]] = {
    "formatter": {"allow_empty_blocks": (bool,)},
    "output": {"indent": (int, type(None)), "field": (str, type(None))},
}


@dataclass
class Config:
    """Top-level configuration."""

    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    verbose: bool = False

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        """Load configuration from a YAML file."""
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path} (omit --config to use defaults)")
        return cls.from_yaml_string(text, source=str(path))

    @classmethod
    def from_yaml_string(cls, text: str, source: str = "<string>") -> Config:
        """Load configuration from a YAML string."""
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {source}: {exc}")
        return cls._from_dict(data, source)

    @classmethod
    def _from_dict(cls, data: Any, source: str = "<string>") -> Config:
        if not isinstance(data, dict):
            raise ConfigError(f"Config in {source} must be a mapping, got {type(data).__name__}")

        return cls(
            formatter=FormatterConfig(**_section(data, "formatter", FormatterConfig, source)),
            output=OutputConfig(**_section(data, "output", OutputConfig, source)),
            verbose=bool(data.get("verbose", False)),
        )

    @classmethod
    def default(cls) -> Config:
        """Return the default configuration."""
        return cls()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> Config:
        """Load config from path, or return defaults if path is None."""
        if path is None:
            return cls.default()
        return cls.from_yaml(path)


def _section(data: dict, name: str, section_cls: type, source: str) -> dict[str, Any]:
    """Pick the known, type-checked options of one section; unknown keys are ignored."""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section {name!r} in {source} must be a mapping")

    known = {f.name for f in fields(section_cls)}
    options: dict[str, Any] = {}
    for key, value in section.items():
        if key not in known:
            continue
        expected = _OPTION_TYPES[name][key]
        # bool is an int subclass; only accept it where bool is expected
        if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
            raise ConfigError(f"{name}.{key} in {source} has invalid value {value!r}")
        options[key] = value
    return options
