"""
Reference propagation - resolution of an entry's effective adjustments.

Precedence, highest first:
    1. the entry's manual overrides
    2. the entry's own auto-computed fields for the configured kinds
    3. the cluster's active reference, for every remaining field
    4. otherwise the nearest style rule, for every remaining field
    5. otherwise the prior value (unset when there is none)
"""

import logging
from typing import FrozenSet, Optional

from auto_adjust.adjustments import AdjustmentRecord
from auto_adjust.domain import PhotoEntry
from auto_adjust.style.models import StyleRule

logger = logging.getLogger(__name__)


def resolve_adjustments(
    entry: PhotoEntry,
    computed_fields: FrozenSet[str],
    reference: Optional[PhotoEntry] = None,
    rule: Optional[StyleRule] = None,
    prior: Optional[AdjustmentRecord] = None
) -> AdjustmentRecord:
    """
    Resolve the effective record for one entry.

    Args:
        entry: Entry being resolved (its ``computed`` and ``manual_overrides`` are read)
        computed_fields: Fields owned by the group's auto-compute kinds
        reference: Active reference of the entry's cluster, if any
        rule: Nearest style rule, used only when there is no reference
        prior: Previous resolved record of the entry

    Returns:
        Fully resolved AdjustmentRecord
    """
    resolved = prior or AdjustmentRecord()

    if reference is not None and reference.adjustments is not None:
        resolved = resolved.merge(reference.adjustments.without(computed_fields))
        source = f"reference {reference.id}"
    elif rule is not None:
        resolved = resolved.merge(rule.delta.without(computed_fields))
        source = "style"
    else:
        source = "prior"

    # Computed kinds are photo specific: only the entry's own result counts
    own = (entry.computed or AdjustmentRecord()).only(computed_fields)
    resolved = resolved.merge(own)

    resolved = resolved.merge(entry.manual_overrides)
    logger.debug(f"Resolved {entry.id} from {source}: {resolved.to_dict()}")
    return resolved
