"""Persistence helpers for styles.

Styles are written as JSON or YAML depending on the file suffix.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from auto_adjust.style.models import Style

logger = logging.getLogger(__name__)

YAML_SUFFIXES = ('.yaml', '.yml')


class Serializers:
    """Reusable serialization helpers for style blobs."""

    @staticmethod
    def json_serialize(value: Any) -> bytes:
        """
        Serialize value to JSON bytes (human-readable, cross-platform).

        Args:
            value: Any JSON-serializable value

        Returns:
            UTF-8 encoded JSON bytes
        """
        return json.dumps(value, indent=2).encode('utf-8')

    @staticmethod
    def json_deserialize(data: bytes) -> Any:
        """Deserialize UTF-8 JSON bytes to a Python value."""
        return json.loads(data.decode('utf-8'))

    @staticmethod
    def yaml_serialize(value: Any) -> bytes:
        """Serialize value to YAML bytes (keys keep their insertion order)."""
        return yaml.safe_dump(value, sort_keys=False).encode('utf-8')

    @staticmethod
    def yaml_deserialize(data: bytes) -> Any:
        """Deserialize YAML bytes to a Python value."""
        return yaml.safe_load(data.decode('utf-8'))


def style_to_bytes(style: Style, fmt: str = 'json') -> bytes:
    """Encode a style as JSON or YAML bytes."""
    if fmt == 'json':
        return Serializers.json_serialize(style.to_dict())
    if fmt == 'yaml':
        return Serializers.yaml_serialize(style.to_dict())
    raise ValueError(f"Unknown style format: {fmt}. Available: json, yaml")


def style_from_bytes(data: bytes, fmt: str = 'json') -> Style:
    """Decode a style from JSON or YAML bytes (validates format and version)."""
    if fmt == 'json':
        blob: Dict[str, Any] = Serializers.json_deserialize(data)
    elif fmt == 'yaml':
        blob = Serializers.yaml_deserialize(data)
    else:
        raise ValueError(f"Unknown style format: {fmt}. Available: json, yaml")
    return Style.from_dict(blob)


def _format_for(path: Path) -> str:
    return 'yaml' if path.suffix.lower() in YAML_SUFFIXES else 'json'


def write_style(style: Style, path: Union[str, Path]) -> Path:
    """Write a style file; the suffix picks JSON or YAML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(style_to_bytes(style, _format_for(path)))
    logger.info(f"Saved style ({len(style.rules)} rules) to: {path}")
    return path


def read_style(path: Union[str, Path]) -> Style:
    """Read a style file written by ``write_style``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Style file not found: {path}")
    return style_from_bytes(path.read_bytes(), _format_for(path))
