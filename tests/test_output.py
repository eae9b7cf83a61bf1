import io
import json

import pytest
import yaml

from pkgctx.data_models import Example, FunctionRecord, PackageRecord
from pkgctx.output import render, to_json, to_yaml, write_records
from pkgctx.utils.error_handler import ConfigurationError


@pytest.fixture
def records():
    return [
        PackageRecord(name="demo", version="1.0", description="Café tools"),
        FunctionRecord(
            name="f",
            exported=True,
            signature="f(x)",
            arguments={"x": "Input."},
            examples=[Example(code="a <- 1\nf(a)")],
        ),
    ]


def test_yaml_stream(records):
    text = to_yaml(records)
    documents = list(yaml.safe_load_all(text))

    assert text.startswith("---\n")
    assert text.count("---\n") == 2
    assert "Café" in text
    assert documents[0] == {
        "kind": "package",
        "schema_version": "1.1",
        "name": "demo",
        "version": "1.0",
        "language": "R",
        "description": "Café tools",
    }
    assert list(documents[1])[0] == "kind"
    assert documents[1]["examples"] == [{"code": "a <- 1\nf(a)"}]
    assert "purpose" not in documents[1]


def test_multi_line_code_uses_block_style(records):
    assert "code: |" in to_yaml(records)


def test_json_objects(records):
    text = to_json(records)
    decoder = json.JSONDecoder()
    documents = []
    index = 0
    while index < len(text):
        if text[index].isspace():
            index += 1
            continue
        document, index = decoder.raw_decode(text, index)
        documents.append(document)

    assert [document["kind"] for document in documents] == ["package", "function"]
    assert documents[1]["arguments"] == {"x": "Input."}


def test_render_rejects_unknown_format(records):
    with pytest.raises(ConfigurationError):
        render(records, "xml")


def test_write_records(records):
    stream = io.StringIO()

    write_records(records, stream, "json")

    assert stream.getvalue() == render(records, "json")
