"""
Portable styles distilled from processed groups.
"""

from auto_adjust.style.codec import active_reference, derive_style, nearest_rule
from auto_adjust.style.models import (
    STYLE_FORMAT,
    STYLE_VERSION,
    SUPPORTED_STYLE_VERSIONS,
    Style,
    StyleRule,
)
from auto_adjust.style.serializers import read_style, style_from_bytes, style_to_bytes, write_style

__all__ = [
    'STYLE_FORMAT',
    'STYLE_VERSION',
    'SUPPORTED_STYLE_VERSIONS',
    'Style',
    'StyleRule',
    'active_reference',
    'derive_style',
    'nearest_rule',
    'read_style',
    'style_from_bytes',
    'style_to_bytes',
    'write_style',
]
