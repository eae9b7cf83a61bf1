import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pkgctx.utils.logger import Logger  # noqa: E402


ADD_RD = r"""% Generated by roxygen2: do not edit by hand
\name{add}
\alias{add}
\alias{plus}
\title{Add two numbers}
\usage{
add(x, y = 1)
}
\arguments{
\item{x}{A \code{numeric} vector.}

\item{y}{Value to add.}
}
\value{
The sum of \code{x} and \code{y}.
}
\description{
Adds \emph{two} numbers
together.
}
\examples{
add(1, 2)
\dontrun{
add(1:3,
    4)
}
}
\seealso{\link{sum}}
"""

SCALE_RD = r"""\name{scale_by}
\alias{scale_by}
\title{Scale a vector}
\arguments{
\item{x, factor}{Inputs to scale.}
\item{\dots}{Ignored.}
}
\value{Scaled vector.}
\examples{
scale_by(1:3)
scale_by(1:3, 3)
scale_by(1:3, 4)
scale_by(1:3, 5)
}
"""

DESCRIPTION = """Package: demo
Version: 0.1.0
Title: Demo Package
Description: Tools for demonstrating
    the extractor.
License: MIT
"""

NAMESPACE = """# Generated by roxygen2: do not edit by hand

export(add)
export(scale_by)
S3method(print, demo)
"""

ADD_R = """#' Add numbers
add <- function(x, y = 1) {
  x + y
}

helper <- function(z) z
"""

SCALE_R = """scale_by <- function(x, factor = 2, ...) {
  x * factor
}
print.demo <- function(x, ...) invisible(x)
.internal <- function() NULL
"""


def write_package(root: Path, namespace: bool = True) -> Path:
    """Lay out a small R package source tree under ``root``."""
    (root / "R").mkdir(parents=True)
    (root / "man").mkdir()
    (root / "DESCRIPTION").write_text(DESCRIPTION, encoding="utf-8")
    if namespace:
        (root / "NAMESPACE").write_text(NAMESPACE, encoding="utf-8")
    (root / "R" / "add.R").write_text(ADD_R, encoding="utf-8")
    (root / "R" / "scale.R").write_text(SCALE_R, encoding="utf-8")
    (root / "man" / "add.Rd").write_text(ADD_RD, encoding="utf-8")
    (root / "man" / "scale_by.Rd").write_text(SCALE_RD, encoding="utf-8")
    return root


PYPROJECT = """[build-system]
requires = ["setuptools"]

[project]
name = "pydemo"
version = "1.2.0"
description = "Small demo library"
"""

PY_INIT = '''"""Demo package for extraction."""

from .core import greet
'''

PY_CORE = '''"""Core helpers."""

from typing import List


def greet(name: str, punctuation="!") -> str:
    """Build a greeting.

    Args:
        name: Who to greet.
        punctuation: Trailing mark,
            appended as is.

    Returns:
        The greeting text.

    Examples:
        >>> greet("Ada")
        'Hello, Ada!'
    """
    return f"Hello, {name}{punctuation}"


async def fetch_all(urls: List[str], *, limit: int = 10):
    return urls[:limit]


def _private(x):
    return x


class Greeter:
    """Stateful greeter."""

    def __init__(self, name):
        self.name = name

    def say(self, loud=False):
        """Say the greeting."""
        return greet(self.name)

    def wave(self, times: int = 1):
        pass

    def _secret(self):
        pass


class _Hidden:
    pass
'''


def write_python_package(root: Path) -> Path:
    """Lay out a small Python project under ``root``."""
    (root / "pydemo").mkdir(parents=True)
    (root / "tests").mkdir()
    (root / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
    (root / "setup.py").write_text("from setuptools import setup\nsetup()\n", encoding="utf-8")
    (root / "pydemo" / "__init__.py").write_text(PY_INIT, encoding="utf-8")
    (root / "pydemo" / "core.py").write_text(PY_CORE, encoding="utf-8")
    (root / "tests" / "test_core.py").write_text("def test_greet():\n    pass\n", encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def reset_logger():
    Logger.reset()
    yield
    Logger.reset()


@pytest.fixture
def add_rd() -> str:
    return ADD_RD


@pytest.fixture
def r_package(tmp_path) -> Path:
    return write_package(tmp_path / "demo")


@pytest.fixture
def r_package_without_namespace(tmp_path) -> Path:
    return write_package(tmp_path / "demo", namespace=False)


@pytest.fixture
def description_text() -> str:
    return DESCRIPTION


@pytest.fixture
def python_package(tmp_path) -> Path:
    return write_python_package(tmp_path / "pydemo-src")
