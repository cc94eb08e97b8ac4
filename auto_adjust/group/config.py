"""Group configuration."""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet

from auto_adjust.adjustments import AdjustmentKind, fields_for_kinds, parse_kinds


@dataclass(frozen=True)
class GroupConfig:
    """
    Configuration for one auto-adjustments group.

    The similarity threshold and distance metric are deliberately plain
    configuration: their useful range depends on the feature extractor.
    """

    kinds: FrozenSet[AdjustmentKind] = field(default_factory=frozenset)
    algorithm: str = "threshold"
    similarity_threshold: float = 0.25
    metric: str = "euclidean"
    normalize: bool = False
    max_timing_records: int = 1000

    def __post_init__(self):
        object.__setattr__(self, "kinds", parse_kinds(self.kinds))
        if self.similarity_threshold < 0:
            raise ValueError(f"similarity_threshold must be >= 0, got {self.similarity_threshold}")
        if self.max_timing_records < 1:
            raise ValueError(f"max_timing_records must be positive, got {self.max_timing_records}")

    @property
    def computed_fields(self) -> FrozenSet[str]:
        """Adjustment fields owned by the configured kinds."""
        return fields_for_kinds(self.kinds)

    def clustering_config(self) -> Dict[str, Any]:
        """Config dict in the shape expected by ``load_clustering_method``."""
        return {
            'algorithm': self.algorithm,
            'params': {
                'threshold': self.similarity_threshold,
                'metric': self.metric,
                'normalize': self.normalize,
            },
        }

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "GroupConfig":
        """
        Build from a full configuration dictionary.

        Reads ``config['auto_adjust']['group']``; missing keys keep defaults.
        """
        group = config.get('auto_adjust', {}).get('group', {})
        clustering = group.get('clustering', {})
        telemetry = group.get('telemetry', {})
        defaults = cls()
        return cls(
            kinds=parse_kinds(group.get('kinds', [])),
            algorithm=clustering.get('algorithm', defaults.algorithm),
            similarity_threshold=float(clustering.get('similarity_threshold', defaults.similarity_threshold)),
            metric=clustering.get('metric', defaults.metric),
            normalize=bool(clustering.get('normalize', defaults.normalize)),
            max_timing_records=int(telemetry.get('max_records', defaults.max_timing_records)),
        )

    @classmethod
    def from_global(cls) -> "GroupConfig":
        """Build from the global configuration file."""
        from auto_adjust.config import get_global_config

        return cls.from_dict(get_global_config().to_dict())
