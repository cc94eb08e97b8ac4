"""
Adjustment records and auto-compute kinds.

An ``AdjustmentRecord`` is a partial record: every field is optional and an
unset field means "no opinion". Records are combined with ``merge`` where the
right-hand side wins for every field it sets.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

import numpy as np


class AdjustmentKind(str, Enum):
    """Categories of fields that are auto-computed per photo."""
    LIGHTING = "lighting"
    WHITE_BALANCE = "white_balance"
    STRAIGHTEN = "straighten"


KIND_FIELDS: Dict[AdjustmentKind, tuple] = {
    AdjustmentKind.LIGHTING: ("exposure", "contrast", "highlights", "shadows", "whites", "blacks"),
    AdjustmentKind.WHITE_BALANCE: ("temperature", "tint"),
    AdjustmentKind.STRAIGHTEN: ("rotation",),
}


@dataclass(frozen=True)
class AdjustmentRecord:
    """Optional-field adjustment record."""

    # lighting
    exposure: Optional[float] = None
    contrast: Optional[float] = None
    highlights: Optional[float] = None
    shadows: Optional[float] = None
    whites: Optional[float] = None
    blacks: Optional[float] = None
    # white balance
    temperature: Optional[float] = None
    tint: Optional[float] = None
    # straighten
    rotation: Optional[float] = None
    # creative
    saturation: Optional[float] = None
    vibrance: Optional[float] = None
    clarity: Optional[float] = None
    dehaze: Optional[float] = None
    sharpness: Optional[float] = None
    vignette: Optional[float] = None
    grain: Optional[float] = None

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_dict(cls, values: Optional[Dict[str, Any]]) -> "AdjustmentRecord":
        """
        Build a record from a plain mapping.

        Args:
            values: Mapping of field name to number (None values are skipped)

        Returns:
            AdjustmentRecord with the given fields set

        Raises:
            ValueError: If a key is not a known adjustment field
        """
        if not values:
            return cls()
        known = set(cls.field_names())
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown adjustment fields: {unknown}. Known: {sorted(known)}")
        return cls(**{k: float(v) for k, v in values.items() if v is not None})

    def to_dict(self) -> Dict[str, float]:
        """Return only the fields that are set."""
        return {name: getattr(self, name) for name in self.field_names() if getattr(self, name) is not None}

    @property
    def set_fields(self) -> FrozenSet[str]:
        return frozenset(self.to_dict())

    @property
    def is_empty(self) -> bool:
        return not self.set_fields

    def merge(self, other: "AdjustmentRecord") -> "AdjustmentRecord":
        """Overlay ``other`` on top of this record; fields set in ``other`` win."""
        if other is None or other.is_empty:
            return self
        return replace(self, **other.to_dict())

    def only(self, names: Iterable[str]) -> "AdjustmentRecord":
        """Keep just the given fields."""
        keep = set(names)
        return AdjustmentRecord(**{k: v for k, v in self.to_dict().items() if k in keep})

    def without(self, names: Iterable[str]) -> "AdjustmentRecord":
        """Drop the given fields."""
        drop = set(names)
        return AdjustmentRecord(**{k: v for k, v in self.to_dict().items() if k not in drop})


def parse_kinds(values: Iterable[Any]) -> FrozenSet[AdjustmentKind]:
    """Convert kind names (or kinds) into a frozenset of ``AdjustmentKind``."""
    kinds = set()
    for value in values or ():
        if isinstance(value, AdjustmentKind):
            kinds.add(value)
            continue
        try:
            kinds.add(AdjustmentKind(str(value).lower()))
        except ValueError:
            available = ", ".join(k.value for k in AdjustmentKind)
            raise ValueError(f"Unknown adjustment kind: {value}. Available: {available}") from None
    return frozenset(kinds)


def fields_for_kinds(kinds: Iterable[AdjustmentKind]) -> FrozenSet[str]:
    """All field names owned by the given kinds."""
    names = set()
    for kind in kinds:
        names.update(KIND_FIELDS[kind])
    return frozenset(names)


def median_record(records: List[AdjustmentRecord]) -> AdjustmentRecord:
    """
    Field-wise median over a list of records.

    A field is only considered across the records that set it; fields set by
    no record stay unset.
    """
    values: Dict[str, List[float]] = {}
    for record in records:
        for name, value in record.to_dict().items():
            values.setdefault(name, []).append(value)
    return AdjustmentRecord(**{name: float(np.median(vals)) for name, vals in values.items()})
