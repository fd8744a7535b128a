"""Configuration loading for savreader (.savreader.yml)."""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".savreader.yml"
OUTPUT_FORMATS = ("json", "yaml", "csv")
_DECODE_ERROR_HANDLERS = ("strict", "replace", "ignore", "backslashreplace")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class DecodeOptions:
    """How fixed-width and label text fields are turned into str."""

    encoding: str = "utf-8"
    errors: str = "replace"


@dataclass(frozen=True)
class OutputOptions:
    """Serialization settings used by the CLI."""

    format: str = "json"
    indent: int = 2


@dataclass
class SavReaderConfig:
    """Represents the settings defined in .savreader.yml."""

    root: Path
    decode: DecodeOptions = field(default_factory=DecodeOptions)
    output: OutputOptions = field(default_factory=OutputOptions)


def load_config(config_path: Path) -> SavReaderConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SavReaderConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    decode = DecodeOptions()
    decode_data = _as_dict(data.get("decode"))
    if decode_data:
        decode = DecodeOptions(
            encoding=_as_str(decode_data.get("encoding")) or decode.encoding,
            errors=_as_str(decode_data.get("errors")) or decode.errors,
        )
    _check_decode_options(decode)

    output = OutputOptions()
    output_data = _as_dict(data.get("output"))
    if output_data:
        indent = _as_int(output_data.get("indent"))
        output = OutputOptions(
            format=(_as_str(output_data.get("format")) or output.format).lower(),
            indent=output.indent if indent is None else indent,
        )
    if output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"Unsupported output format {output.format!r}; expected one of {', '.join(OUTPUT_FORMATS)}"
        )
    if output.indent < 0:
        raise ConfigError("output.indent must not be negative")

    return SavReaderConfig(root=root, decode=decode, output=output)


def _check_decode_options(options: DecodeOptions) -> None:
    try:
        codecs.lookup(options.encoding)
    except LookupError as exc:
        raise ConfigError(f"Unknown text encoding: {options.encoding}") from exc
    if options.errors not in _DECODE_ERROR_HANDLERS:
        raise ConfigError(
            f"Unsupported decode error handler {options.errors!r}; "
            f"expected one of {', '.join(_DECODE_ERROR_HANDLERS)}"
        )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError("Expected a mapping")
    return value


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return str(value)


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ConfigError(f"Expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Expected an integer, got {value!r}") from exc
