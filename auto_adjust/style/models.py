"""Style value types."""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple

import numpy as np

from auto_adjust.adjustments import AdjustmentKind, AdjustmentRecord, parse_kinds
from auto_adjust.errors import VersionMismatchError

STYLE_FORMAT = "auto-adjust-style"
STYLE_VERSION = 1
SUPPORTED_STYLE_VERSIONS = frozenset({1})


@dataclass(frozen=True)
class StyleRule:
    """Maps a feature-space centroid to the adjustment delta of its cluster."""
    centroid: Tuple[float, ...]
    delta: AdjustmentRecord
    weight: int

    def __post_init__(self):
        object.__setattr__(self, "centroid", tuple(float(v) for v in np.asarray(self.centroid).ravel()))
        if self.weight < 1:
            raise ValueError(f"Rule weight must be positive, got {self.weight}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'centroid': list(self.centroid),
            'delta': self.delta.to_dict(),
            'weight': self.weight,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StyleRule":
        return cls(
            centroid=tuple(data['centroid']),
            delta=AdjustmentRecord.from_dict(data.get('delta', {})),
            weight=int(data['weight']),
        )


@dataclass(frozen=True)
class Style:
    """
    Portable, versioned set of centroid -> delta rules.

    A style belongs to no group and can be loaded into any number of them.
    """
    rules: Tuple[StyleRule, ...] = ()
    metric: str = "euclidean"
    computed_kinds: FrozenSet[AdjustmentKind] = field(default_factory=frozenset)
    version: int = STYLE_VERSION

    def __post_init__(self):
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "computed_kinds", parse_kinds(self.computed_kinds))

    @property
    def total_weight(self) -> int:
        return sum(rule.weight for rule in self.rules)

    def to_dict(self) -> Dict[str, Any]:
        """Self-describing, JSON/YAML friendly representation."""
        return {
            'format': STYLE_FORMAT,
            'version': self.version,
            'metric': self.metric,
            'computed_kinds': sorted(kind.value for kind in self.computed_kinds),
            'rules': [rule.to_dict() for rule in self.rules],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Style":
        """
        Rebuild a style from its persisted form.

        Raises:
            VersionMismatchError: If the blob is not a style or its version is unsupported
            ValueError: If the rules are malformed
        """
        if not isinstance(data, dict) or data.get('format') != STYLE_FORMAT:
            raise VersionMismatchError(f"Not an {STYLE_FORMAT} blob")
        version = data.get('version')
        if version not in SUPPORTED_STYLE_VERSIONS:
            raise VersionMismatchError(
                f"Unsupported style version: {version}. Supported: {sorted(SUPPORTED_STYLE_VERSIONS)}"
            )
        try:
            rules = tuple(StyleRule.from_dict(rule) for rule in data.get('rules', []))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed style rule: {e}") from e
        return cls(
            rules=rules,
            metric=data.get('metric', 'euclidean'),
            computed_kinds=parse_kinds(data.get('computed_kinds', [])),
            version=version,
        )
