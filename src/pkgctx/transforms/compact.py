"""Compact mode: shorten prose to one sentence and drop examples."""

from dataclasses import replace
from typing import List, Optional

from pkgctx.config.constants import LIMITS
from pkgctx.data_models import ClassRecord, FunctionRecord, PackageRecord, Record

SENTENCE_TERMINATORS = ".!?"
ELLIPSIS = "..."


def truncate_to_sentence(text: str, max_chars: int = LIMITS.COMPACT_MAX_CHARS) -> str:
    """Cut ``text`` after its first sentence.

    A terminator ends a sentence when it is the last character or is
    followed by whitespace or an uppercase letter. Text without a sentence
    end is cut at the last space before ``max_chars`` and marked with
    ``...``.

    Args:
        text: Prose to shorten
        max_chars: Length limit for text without a sentence end

    Returns:
        Shortened text
    """
    for index, ch in enumerate(text):
        if ch not in SENTENCE_TERMINATORS:
            continue
        following = text[index + 1:index + 2]
        if not following or following.isspace() or following.isupper():
            return text[:index + 1]

    if len(text) > max_chars:
        cut = text.rfind(" ", 0, max_chars)
        if cut == -1:
            cut = max_chars
        return text[:cut] + ELLIPSIS
    return text


def _truncate(text: Optional[str]) -> Optional[str]:
    return truncate_to_sentence(text) if text is not None else None


def compact_record(record: Record) -> Record:
    if isinstance(record, PackageRecord):
        return replace(record, description=_truncate(record.description))
    if isinstance(record, FunctionRecord):
        return replace(
            record,
            purpose=_truncate(record.purpose),
            returns=_truncate(record.returns),
            arguments={name: truncate_to_sentence(desc) for name, desc in record.arguments.items()},
            examples=[]
        )
    if isinstance(record, ClassRecord):
        return replace(
            record,
            purpose=_truncate(record.purpose),
            methods={name: truncate_to_sentence(desc) for name, desc in record.methods.items()}
        )
    return record


def compact_records(records: List[Record]) -> List[Record]:
    """Apply compact mode to every record; the input list is not modified."""
    return [compact_record(record) for record in records]
