import pytest

from pkgctx.data_models import PythonFunction, PythonParameter
from pkgctx.extractors.python.source_extractor import PythonSourceExtractor

SOURCE = '''"""Module docs.

More text.
"""

import os

CONSTANT = 1


def plain(a, b=2, *args, c, d=None, **kwargs):
    return a


def positional(x, /, y, *, z: int = 3) -> "Result":
    """Positional-only demo."""


def keyword_only(*, flag: bool = False):
    pass


async def fetch(url: str, timeout: float = 1.5) -> bytes:
    """Fetch a URL."""


def _helper():
    pass


if os.name == "nt":
    def windows_only():
        pass


class Client:
    """HTTP client."""

    def __init__(self, base: str):
        pass

    def get(self, path):
        """Send a GET request."""

    def _retry(self):
        pass

    class Nested:
        pass
'''


@pytest.fixture
def module():
    return PythonSourceExtractor().parse_content(SOURCE, "pkg/client.py")


def functions_by_name(module):
    return {function.name: function for function in module.functions}


def test_module_name_and_docstring(module):
    assert module.name == "client"
    assert module.docstring == "Module docs.\n\nMore text."


def test_only_public_top_level_functions(module):
    assert [function.name for function in module.functions] == ["plain", "positional", "keyword_only", "fetch"]


def test_variadic_and_keyword_only_signature(module):
    plain = functions_by_name(module)["plain"]

    assert plain.signature == "plain(a, b=2, *args, c, d=None, **kwargs)"
    assert plain.line == 11
    assert plain.source_file == "pkg/client.py"


def test_positional_only_marker(module):
    positional = functions_by_name(module)["positional"]

    assert positional.signature == "positional(x, /, y, *, z: int = 3) -> 'Result'"
    assert positional.docstring == "Positional-only demo."


def test_bare_star_marker(module):
    assert functions_by_name(module)["keyword_only"].signature == "keyword_only(*, flag: bool = False)"


def test_async_function(module):
    fetch = functions_by_name(module)["fetch"]

    assert fetch.signature == "fetch(url: str, timeout: float = 1.5) -> bytes"
    assert fetch.return_annotation == "bytes"


def test_class_methods_keep_init_and_drop_private(module):
    [client] = module.classes

    assert client.name == "Client"
    assert client.docstring == "HTTP client."
    assert [method.name for method in client.methods] == ["__init__", "get"]
    assert client.methods[0].signature == "__init__(self, base: str)"


def test_include_internal_keeps_underscore_names():
    module = PythonSourceExtractor(include_internal=True).parse_content(SOURCE, "client.py")

    assert "_helper" in [function.name for function in module.functions]
    assert [method.name for method in module.classes[0].methods] == ["__init__", "get", "_retry"]


def test_syntax_error_returns_none():
    assert PythonSourceExtractor().parse_content("def broken(:\n", "broken.py") is None


def test_null_byte_returns_none():
    assert PythonSourceExtractor().parse_content("x = 1\x00\n", "nul.py") is None


def test_extract_file_reads_from_disk(tmp_path):
    path = tmp_path / "mod.py"
    path.write_text("def f(x):\n    pass\n", encoding="utf-8")

    module = PythonSourceExtractor().extract_file(path)

    assert [function.signature for function in module.functions] == ["f(x)"]


def test_extract_file_skips_other_extensions(tmp_path):
    path = tmp_path / "mod.R"
    path.write_text("f <- function(x) x\n", encoding="utf-8")

    assert PythonSourceExtractor().extract_file(path) is None


def test_parameter_rendering():
    function = PythonFunction(name="f", parameters=[
        PythonParameter("a"),
        PythonParameter("b", default="1"),
        PythonParameter("c", annotation="int", default="2"),
        PythonParameter("*"),
        PythonParameter("d", annotation="str"),
    ], return_annotation="None")

    assert function.signature == "f(a, b=1, c: int = 2, *, d: str) -> None"
    assert [parameter.is_marker for parameter in function.parameters] == [False, False, False, True, False]
