import inspect
import sys

import pytest

from pkgctx.data_models import ClassRecord, ExtractOptions, FunctionRecord, PackageRecord
from pkgctx.extractors.python.introspection import (
    PythonIntrospectionExtractor,
    function_from_object,
    is_module_name,
    parameters_from_signature,
)
from pkgctx.utils.error_handler import IntrospectionError

MODULE_SOURCE = '''"""Installed demo module.

Longer text.
"""

from os.path import join

__version__ = "4.5.6"


def area(width: float, height: float = 1.0) -> float:
    """Compute an area.

    Args:
        width: Horizontal size.

    >>> area(2)
    2.0
    """
    return width * height


def _hidden():
    pass


class Box:
    """A box."""

    def __init__(self, size):
        self.size = size

    def volume(self):
        return self.size ** 3
'''


@pytest.fixture
def installed_module(tmp_path, monkeypatch):
    name = "pkgctx_installed_demo"
    (tmp_path / f"{name}.py").write_text(MODULE_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, name, raising=False)
    yield name
    sys.modules.pop(name, None)


def test_introspect_module(installed_module):
    records = PythonIntrospectionExtractor().extract(installed_module)

    package = records[0]
    assert isinstance(package, PackageRecord)
    assert package.name == installed_module
    assert package.version == "4.5.6"
    assert package.language == "Python"
    assert package.description == "Installed demo module."

    # os.path.join is imported, not defined here
    assert [record.name for record in records[1:]] == ["area"]
    area = records[1]
    assert isinstance(area, FunctionRecord)
    assert area.signature == "area(width: float, height: float = 1.0) -> float"
    assert area.purpose == "Compute an area."
    assert area.arguments == {"width": "Horizontal size.", "height": "float"}
    assert area.return_type == "float"
    assert [example.code for example in area.examples] == ["area(2)"]


def test_introspect_classes_and_internal(installed_module):
    options = ExtractOptions(include_internal=True, emit_classes=True)
    records = PythonIntrospectionExtractor().extract(installed_module, options)

    names = [record.name for record in records[1:] if isinstance(record, FunctionRecord)]
    assert names == ["_hidden", "area"]
    [box] = [record for record in records if isinstance(record, ClassRecord)]
    assert box.purpose == "A box."
    assert box.methods == {"__init__": "__init__(self, size)", "volume": "volume(self)"}


@pytest.mark.parametrize("name", ["", "1abc", "pkg-name", "a..b", "os; rm", "json\n"])
def test_invalid_module_names(name):
    assert not is_module_name(name)
    with pytest.raises(IntrospectionError) as excinfo:
        PythonIntrospectionExtractor().extract(name)
    assert excinfo.value.error_code == "bad_spec"


def test_missing_module():
    with pytest.raises(IntrospectionError) as excinfo:
        PythonIntrospectionExtractor().extract("pkgctx_no_such_module_xyz")

    assert excinfo.value.error_code == "not_found"


def test_module_raising_on_import(tmp_path, monkeypatch):
    name = "pkgctx_failing_demo"
    (tmp_path / f"{name}.py").write_text("raise RuntimeError('boom')\n", encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, name, raising=False)

    with pytest.raises(IntrospectionError) as excinfo:
        PythonIntrospectionExtractor().extract(name)

    assert excinfo.value.error_code == "introspection_failed"


def test_parameters_from_signature_markers():
    def sample(a, /, b, *, c=1, **rest):
        pass

    rendered = [parameter.render() for parameter in parameters_from_signature(inspect.signature(sample))]

    assert rendered == ["a", "/", "b", "*", "c=1", "**rest"]


def test_varargs_suppress_star_marker():
    def sample(*args, key=None):
        pass

    rendered = [parameter.render() for parameter in parameters_from_signature(inspect.signature(sample))]

    assert rendered == ["*args", "key=None"]


def test_callable_without_signature(monkeypatch):
    def opaque():
        """Opaque callable."""

    def no_signature(obj):
        raise ValueError("no signature found")

    monkeypatch.setattr(inspect, "signature", no_signature)
    function = function_from_object("opaque", opaque)

    assert function.signature == "opaque(...)"
    assert function.docstring == "Opaque callable."
