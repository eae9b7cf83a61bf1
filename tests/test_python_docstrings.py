import pytest

from pkgctx.extractors.python.docstrings import (
    ARGS_SECTION,
    OTHER_SECTION,
    RETURNS_SECTION,
    doctest_examples,
    match_section_header,
    parse_docstring,
)

GOOGLE = """Fetch rows from a table.

Longer explanation that is not part
of the summary.

Args:
    table (str): Table name.
    limit: Maximum rows,
        counted after filtering.
    **filters: Column equality filters.

Returns:
    list: Matching rows.

Raises:
    KeyError: If the table is unknown.
"""

NUMPY = """Scale values.

Parameters
----------
values : array_like
    Input values.
factor : float

Returns
-------
ndarray
"""


def test_google_sections():
    info = parse_docstring(GOOGLE)

    assert info.summary == "Fetch rows from a table."
    assert info.parameters == {
        "table": "Table name.",
        "limit": "Maximum rows, counted after filtering.",
        "filters": "Column equality filters.",
    }
    assert info.returns == "list: Matching rows."


def test_raises_section_is_not_read_as_parameters():
    assert "KeyError" not in parse_docstring(GOOGLE).parameters


def test_numpy_sections_fall_back_to_type():
    info = parse_docstring(NUMPY)

    assert info.summary == "Scale values."
    assert info.parameters == {"values": "Input values.", "factor": "float"}
    assert info.returns == "ndarray"


def test_summary_joins_wrapped_first_paragraph():
    info = parse_docstring("Compute the thing\nacross lines.\n\nDetails.")

    assert info.summary == "Compute the thing across lines."


@pytest.mark.parametrize("docstring", [None, "", "   \n  "])
def test_empty_docstring(docstring):
    info = parse_docstring(docstring)

    assert info.summary is None
    assert info.parameters == {}
    assert info.returns is None
    assert info.examples == []


def test_doctest_examples_in_order():
    text = "Add.\n\n>>> add(1, 2)\n3\n>>> for i in range(2):\n...     add(i, 1)\n1\n2\n"

    assert doctest_examples(text) == ["add(1, 2)", "for i in range(2):\n    add(i, 1)"]
    assert parse_docstring(text).examples == ["add(1, 2)", "for i in range(2):\n    add(i, 1)"]


def test_malformed_doctest_is_skipped():
    assert doctest_examples(">>>x = 1") == []


@pytest.mark.parametrize("line, following, expected", [
    ("Args:", "", ARGS_SECTION),
    ("Keyword Arguments:", "", ARGS_SECTION),
    ("Yields:", "", RETURNS_SECTION),
    ("Parameters", "----------", ARGS_SECTION),
    ("Notes", "-----", OTHER_SECTION),
    ("Example:", "", OTHER_SECTION),
    ("    Args:", "", None),
    ("Plain sentence.", "", None),
    ("name: value pair with text:", "", None),
])
def test_match_section_header(line, following, expected):
    assert match_section_header(line, following) == expected
