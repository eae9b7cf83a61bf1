"""Post-processing passes over extracted records."""

from .compact import compact_records, truncate_to_sentence
from .hoist import hoist_common_args

__all__ = ['compact_records', 'truncate_to_sentence', 'hoist_common_args']
