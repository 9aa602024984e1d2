"""Defaults and the optional TOML user config for the dbfr CLI."""
from __future__ import annotations

import codecs
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

APP_NAME = "dbfr"

DEFAULT_ENCODING = "cp1252"
DEFAULT_FORMAT = "csv"
EXPORT_FORMATS = ("csv", "txt", "json")


@dataclass
class Config:
    encoding: Optional[str] = None
    format: Optional[str] = None


def get_config_path() -> Path:
    """Return the TOML config file path via click.get_app_dir."""
    return Path(click.get_app_dir(APP_NAME)) / "config.toml"


def load_config(path: Optional[Path] = None) -> Config:
    """Read TOML config. Returns empty Config if file missing."""
    path = path or get_config_path()
    if not path.exists():
        return Config()

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise click.UsageError(f"Invalid config file {path}: {e}")

    return Config(encoding=data.get("encoding"), format=data.get("format"))


def validate_encoding(encoding: str) -> bool:
    """Check that Python knows a codec by this name."""
    try:
        codecs.lookup(encoding)
    except LookupError:
        return False
    return True


def resolve_encoding(encoding: Optional[str], config: Config) -> str:
    """Resolve text encoding: --encoding > config file > default.

    Raises click.UsageError if the resolved name is not a known codec.
    """
    resolved = encoding or config.encoding or DEFAULT_ENCODING
    if not validate_encoding(resolved):
        raise click.UsageError(f"Unknown encoding: {resolved}")
    return resolved


def resolve_format(fmt: Optional[str], config: Config) -> str:
    """Resolve export format: --format > config file > default."""
    resolved = fmt or config.format or DEFAULT_FORMAT
    if resolved not in EXPORT_FORMATS:
        raise click.UsageError(
            f"Unknown export format '{resolved}'. Choose from: {', '.join(EXPORT_FORMATS)}"
        )
    return resolved
