"""Application-wide configuration loaded from JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "app.json"
_APP_CONFIG_CACHE: AppConfig | None = None

_DEFAULT_PREVIEW_BYTES = 16
_DEFAULT_LOG_VERBOSITY = "warning"
_KNOWN_VERBOSITIES = {"disabled", "error", "warning", "info", "verbose"}


@dataclass(frozen=True)
class ParserOptions:
    """Options forwarded to :class:`midi_parser.MidiParser`."""

    strict_track_ids: bool

    def as_kwargs(self) -> dict[str, Any]:
        return {"strict_track_ids": self.strict_track_ids}


@dataclass(frozen=True)
class DumpOptions:
    """Settings that control the ``midi-dump`` output."""

    payload_preview_bytes: int
    show_payload: bool
    log_verbosity: str


@dataclass(frozen=True)
class AppConfig:
    """Structured configuration values for the parser tools."""

    parser: ParserOptions
    dump: DumpOptions


def get_app_config() -> AppConfig:
    """Return the cached application configuration."""

    global _APP_CONFIG_CACHE
    if _APP_CONFIG_CACHE is None:
        _APP_CONFIG_CACHE = load_app_config()
    return _APP_CONFIG_CACHE


def reset_app_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _APP_CONFIG_CACHE
    _APP_CONFIG_CACHE = None


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    parser_section = data.get("parser") if isinstance(data, Mapping) else None
    dump_section = data.get("dump") if isinstance(data, Mapping) else None
    return AppConfig(
        parser=_parse_parser_section(parser_section),
        dump=_parse_dump_section(dump_section),
    )


def get_parser_options() -> ParserOptions:
    """Convenience accessor for the parser options."""

    return get_app_config().parser


def get_dump_options() -> DumpOptions:
    """Convenience accessor for the dump tool options."""

    return get_app_config().dump


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_parser_section(section: Mapping[str, Any] | None) -> ParserOptions:
    if not isinstance(section, Mapping):
        return ParserOptions(strict_track_ids=False)
    strict = _coerce_bool(section.get("strict_track_ids"), default=False)
    return ParserOptions(strict_track_ids=strict)


def _parse_dump_section(section: Mapping[str, Any] | None) -> DumpOptions:
    if not isinstance(section, Mapping):
        return DumpOptions(
            payload_preview_bytes=_DEFAULT_PREVIEW_BYTES,
            show_payload=False,
            log_verbosity=_DEFAULT_LOG_VERBOSITY,
        )
    preview = _coerce_positive_int(section.get("payload_preview_bytes"), default=_DEFAULT_PREVIEW_BYTES)
    show_payload = _coerce_bool(section.get("show_payload"), default=False)
    verbosity = _coerce_verbosity(section.get("log_verbosity"), default=_DEFAULT_LOG_VERBOSITY)
    return DumpOptions(
        payload_preview_bytes=preview,
        show_payload=show_payload,
        log_verbosity=verbosity,
    )


def _coerce_positive_int(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = int(value)
    elif isinstance(value, str):
        try:
            candidate = int(float(value))
        except ValueError:
            return default
    else:
        return default
    if candidate <= 0:
        return default
    return candidate


def _coerce_bool(value: Any, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "on", "1"}:
            return True
        if lowered in {"false", "no", "off", "0"}:
            return False
    return default


def _coerce_verbosity(value: Any, *, default: str) -> str:
    if not isinstance(value, str):
        return default
    lowered = value.strip().lower()
    if lowered not in _KNOWN_VERBOSITIES:
        return default
    return lowered


__all__ = [
    "AppConfig",
    "DumpOptions",
    "ParserOptions",
    "get_app_config",
    "get_dump_options",
    "get_parser_options",
    "load_app_config",
    "reset_app_config_cache",
]
