"""Version lookup for the parser package and the ``midi-dump`` tool."""

from __future__ import annotations

import os
import subprocess
from functools import lru_cache
from importlib import metadata, resources

DISTRIBUTION_NAME = "midi-stream-parser"
_FALLBACK_VERSION = "0.0.0-dev"
_VERSION_ENV = "MIDI_PARSER_VERSION"


def _version_from_env() -> str | None:
    raw = os.environ.get(_VERSION_ENV)
    return _normalize(raw) if raw else None


def _version_from_metadata() -> str | None:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return None


def _read_version_file() -> str | None:
    try:
        text = resources.files(__package__).joinpath("VERSION").read_text(encoding="utf-8")
    except (FileNotFoundError, ModuleNotFoundError):
        return None
    return text.strip() or None


def _version_from_git() -> str | None:
    try:
        output = subprocess.check_output(
            ["git", "describe", "--tags", "--dirty"],
            stderr=subprocess.DEVNULL,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return _normalize(output)


def _normalize(raw_version: str) -> str:
    version = raw_version.strip()
    return version[1:] if version.startswith("v") else version


@lru_cache(maxsize=1)
def get_app_version() -> str:
    """Return the version, preferring the environment override.

    Falls back to installed distribution metadata, the packaged ``VERSION``
    file, then ``git describe`` in a source checkout.
    """

    for resolver in (_version_from_env, _version_from_metadata, _read_version_file, _version_from_git):
        version = resolver()
        if version:
            return version
    return _FALLBACK_VERSION


__all__ = ["DISTRIBUTION_NAME", "get_app_version"]
