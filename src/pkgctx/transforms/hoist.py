"""Move argument descriptions shared by many functions onto the package record."""

from dataclasses import replace
from typing import Dict, List
import logging

from pkgctx.config.constants import LIMITS
from pkgctx.data_models import FunctionRecord, PackageRecord, Record

logger = logging.getLogger(__name__)

SEE_COMMON = "(see common_arguments)"


def find_common_arguments(records: List[Record],
                          min_occurrences: int = LIMITS.HOIST_MIN_OCCURRENCES) -> Dict[str, str]:
    """Argument names documented by at least ``min_occurrences`` functions.

    Returns:
        Sorted mapping of name to the first non-empty description seen
    """
    counts: Dict[str, int] = {}
    descriptions: Dict[str, str] = {}
    for record in records:
        if not isinstance(record, FunctionRecord):
            continue
        for name, description in record.arguments.items():
            counts[name] = counts.get(name, 0) + 1
            if description and name not in descriptions:
                descriptions[name] = description

    return {
        name: descriptions[name]
        for name in sorted(counts)
        if counts[name] >= min_occurrences and name in descriptions
    }


def hoist_common_args(records: List[Record],
                      min_occurrences: int = LIMITS.HOIST_MIN_OCCURRENCES) -> List[Record]:
    """Hoist common arguments into the first package record.

    Each function's entry for a hoisted argument is replaced by a pointer
    to ``common_arguments``. Records are returned unchanged when nothing
    qualifies.
    """
    common = find_common_arguments(records, min_occurrences)
    if not common:
        return list(records)
    logger.debug(f"Hoisting {len(common)} common arguments: {', '.join(common)}")

    hoisted: List[Record] = []
    package_done = False
    for record in records:
        if isinstance(record, PackageRecord) and not package_done:
            record = replace(record, common_arguments=dict(common))
            package_done = True
        elif isinstance(record, FunctionRecord):
            record = replace(record, arguments={
                name: SEE_COMMON if name in common else description
                for name, description in record.arguments.items()
            })
        hoisted.append(record)
    return hoisted
