"""Record serialization to YAML document streams or JSON."""

import json
from typing import Callable, Dict, List, TextIO

import yaml

from pkgctx.data_models import Record
from pkgctx.utils.error_handler import ConfigurationError

DOCUMENT_SEPARATOR = "---"


def _literal_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    style = "|" if "\n" in data else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


class _RecordDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings (example code) as block literals."""


_RecordDumper.add_representer(str, _literal_str)


def to_yaml(records: List[Record]) -> str:
    """Render records as a YAML stream, one ``---``-prefixed document each."""
    parts: List[str] = []
    for record in records:
        parts.append(DOCUMENT_SEPARATOR + "\n")
        parts.append(yaml.dump(
            record.to_dict(),
            Dumper=_RecordDumper,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False
        ))
    return "".join(parts)


def to_json(records: List[Record]) -> str:
    """Render records as pretty-printed JSON objects, one after another."""
    return "".join(json.dumps(record.to_dict(), indent=2, ensure_ascii=False) + "\n" for record in records)


FORMATTERS: Dict[str, Callable[[List[Record]], str]] = {
    'yaml': to_yaml,
    'json': to_json,
}


def render(records: List[Record], output_format: str = "yaml") -> str:
    """Render records in the named format.

    Raises:
        ConfigurationError: If the format is unknown
    """
    formatter = FORMATTERS.get(output_format)
    if formatter is None:
        raise ConfigurationError(
            f"Unknown output format: {output_format}",
            suggestions=[f"Use one of: {', '.join(FORMATTERS)}"],
            error_code="bad_format"
        )
    return formatter(records)


def write_records(records: List[Record], stream: TextIO, output_format: str = "yaml") -> None:
    stream.write(render(records, output_format))
