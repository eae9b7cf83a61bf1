"""Package acquisition from CRAN, PyPI, GitHub archives or a local directory."""

import re
import tarfile
import tempfile
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence
import logging

import requests

from pkgctx.config.constants import NETWORK
from pkgctx.extractors.python.metadata import PROJECT_FILES, is_distribution_name, read_project_metadata
from pkgctx.extractors.r.metadata import is_package_name, parse_dcf, parse_description
from pkgctx.utils.error_handler import FetchError
from pkgctx.utils.file_reader import read_file

logger = logging.getLogger(__name__)

R = "r"
PYTHON = "python"

LOCAL_PREFIX = "local:"
GITHUB_PREFIX = "github:"
_LOCAL_STARTS = (".", "/", "~")
_STANZA_BREAK = re.compile(r"\n[ \t]*\n")
_CHUNK_SIZE = 64 * 1024
_PYPI_VERSION = re.compile(r"[A-Za-z0-9][A-Za-z0-9._+!-]*")

R_MARKERS = ("DESCRIPTION",)
PYTHON_MARKERS = PROJECT_FILES


class SourceKind(Enum):
    """Where a package comes from."""
    CRAN = "cran"
    PYPI = "pypi"
    GITHUB = "github"
    LOCAL = "local"


@dataclass
class PackageSource:
    """A parsed package spec string."""
    kind: SourceKind
    name: str
    owner: Optional[str] = None
    ref: Optional[str] = None
    path: Optional[Path] = None
    language: str = R


def _parse_registry_name(spec: str, language: str) -> PackageSource:
    if language == PYTHON:
        name, pinned, version = spec.partition("==")
        if not is_distribution_name(name) or (pinned and not _PYPI_VERSION.fullmatch(version)):
            raise FetchError(
                f"Invalid package name: '{spec}'",
                suggestions=["Use a PyPI name (optionally name==version), github:owner/repo, or a local path"],
                error_code="bad_spec"
            )
        return PackageSource(kind=SourceKind.PYPI, name=name, ref=version or None, language=language)

    if not is_package_name(spec):
        raise FetchError(
            f"Invalid package name: '{spec}'",
            suggestions=["Use a CRAN name, github:owner/repo, or a local path"],
            error_code="bad_spec"
        )
    return PackageSource(kind=SourceKind.CRAN, name=spec, language=language)


def parse_package_spec(spec: str, language: str = R) -> PackageSource:
    """Parse a package spec.

    Accepted forms are a registry name (CRAN for R, PyPI for Python, where
    ``name==version`` pins a release), ``github:owner/repo[@ref]``, and
    local paths starting with ``.``, ``/`` or ``~`` or prefixed with
    ``local:``.

    Args:
        spec: Package spec string
        language: ``r`` or ``python``

    Returns:
        PackageSource

    Raises:
        FetchError: If the spec is malformed or a local path does not exist
    """
    spec = spec.strip()
    if spec.startswith(LOCAL_PREFIX) or spec.startswith(_LOCAL_STARTS):
        raw = spec[len(LOCAL_PREFIX):] if spec.startswith(LOCAL_PREFIX) else spec
        path = Path(raw).expanduser()
        if not path.is_dir():
            raise FetchError(
                f"Local path does not exist: {path}",
                suggestions=["Pass the root directory of the package source tree"],
                error_code="bad_spec"
            )
        path = path.resolve()
        return PackageSource(kind=SourceKind.LOCAL, name=path.name, path=path, language=language)

    if spec.startswith(GITHUB_PREFIX):
        rest = spec[len(GITHUB_PREFIX):]
        repo_part, _, ref = rest.partition("@")
        parts = repo_part.split("/")
        if len(parts) != 2 or not all(parts):
            raise FetchError(
                f"Invalid GitHub spec: expected 'github:owner/repo', got '{spec}'",
                suggestions=["Example: github:tidyverse/dplyr@main"],
                error_code="bad_spec"
            )
        return PackageSource(kind=SourceKind.GITHUB, name=parts[1], owner=parts[0], ref=ref or None,
                             language=language)

    return _parse_registry_name(spec, language)


class FetchedPackage:
    """A package source tree on disk.

    Use as a context manager; a temporary download directory is removed
    on exit. Local packages are never removed.
    """

    def __init__(self, source_path: Path, name: str, version: Optional[str] = None,
                 temp_dir: Optional[tempfile.TemporaryDirectory] = None):
        self.source_path = Path(source_path)
        self.name = name
        self.version = version
        self._temp_dir = temp_dir

    def cleanup(self) -> None:
        if self._temp_dir is not None:
            self._temp_dir.cleanup()
            self._temp_dir = None

    def __enter__(self) -> "FetchedPackage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()

    def __repr__(self) -> str:
        return f"FetchedPackage(name={self.name!r}, version={self.version!r}, path={str(self.source_path)!r})"


def find_cran_version(index_text: str, name: str) -> Optional[str]:
    """Look up a package's current version in a CRAN ``PACKAGES`` index."""
    for stanza in _STANZA_BREAK.split(index_text):
        fields = parse_dcf(stanza)
        if fields.get("Package") == name:
            return fields.get("Version")
    return None


def find_package_root(directory: Path, markers: Sequence[str] = R_MARKERS) -> Optional[Path]:
    """First directory at or one level below ``directory`` holding one of ``markers``."""
    def is_root(path: Path) -> bool:
        return any((path / marker).is_file() for marker in markers)

    if is_root(directory):
        return directory
    for child in sorted(p for p in directory.iterdir() if p.is_dir()):
        if is_root(child):
            return child
    return None


def _python_root(directory: Path) -> Path:
    """Project root of an unpacked Python archive.

    Falls back to the sole top-level directory, then to ``directory``
    itself, for trees with no project file.
    """
    root = find_package_root(directory, PYTHON_MARKERS)
    if root is not None:
        return root
    children = [p for p in directory.iterdir() if p.is_dir()]
    return children[0] if len(children) == 1 else directory


def _source_version(root: Path, language: str) -> Optional[str]:
    if language == PYTHON:
        return read_project_metadata(root).version
    content = read_file(root / "DESCRIPTION")
    if content is None:
        return None
    return parse_description(content).version


def select_sdist(release: dict) -> Optional[dict]:
    """The source distribution entry of a PyPI JSON release document."""
    for entry in release.get("urls") or []:
        if isinstance(entry, dict) and entry.get("packagetype") == "sdist" and entry.get("url"):
            return entry
    return None


class PackageFetcher:
    """Downloads and unpacks package sources."""

    def __init__(self, cran_mirror: str = NETWORK.CRAN_MIRROR, timeout: int = NETWORK.TIMEOUT,
                 session: Optional[requests.Session] = None, pypi_index: str = NETWORK.PYPI_INDEX):
        """Initialize the fetcher.

        Args:
            cran_mirror: Base URL of the CRAN mirror
            timeout: HTTP timeout in seconds
            session: HTTP session; a new one is created when omitted
            pypi_index: Base URL of the PyPI JSON API
        """
        self.cran_mirror = cran_mirror.rstrip("/")
        self.pypi_index = pypi_index.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, source: PackageSource) -> FetchedPackage:
        """Make a package source tree available on disk.

        Raises:
            FetchError: On network, archive or layout failures
        """
        if source.kind is SourceKind.LOCAL:
            return self._fetch_local(source)
        if source.kind is SourceKind.GITHUB:
            return self._fetch_github(source)
        if source.kind is SourceKind.PYPI:
            return self._fetch_pypi(source)
        return self._fetch_cran(source)

    def _fetch_local(self, source: PackageSource) -> FetchedPackage:
        path = source.path or Path(source.name)
        if source.language == PYTHON:
            root = _python_root(path) if path.is_dir() else None
        else:
            root = find_package_root(path)
        if root is None:
            raise FetchError(
                f"No DESCRIPTION file found under {path}",
                suggestions=["Point at the root of an R package source tree"],
                error_code="not_a_package"
            )
        return FetchedPackage(root, source.name, _source_version(root, source.language))

    def _fetch_cran(self, source: PackageSource) -> FetchedPackage:
        index_url = f"{self.cran_mirror}/src/contrib/PACKAGES"
        version = find_cran_version(self._get(index_url).text, source.name)
        if version is None:
            raise FetchError(
                f"Package '{source.name}' not found on CRAN",
                suggestions=["Check the spelling; CRAN names are case-sensitive",
                             "Use github:owner/repo for packages not on CRAN"],
                error_code="not_found"
            )

        temp_dir = tempfile.TemporaryDirectory(prefix="pkgctx-")
        try:
            archive = Path(temp_dir.name) / f"{source.name}_{version}.tar.gz"
            self._download(f"{self.cran_mirror}/src/contrib/{archive.name}", archive)
            self._unpack(archive, Path(temp_dir.name))
            root = Path(temp_dir.name) / source.name
            if not (root / "DESCRIPTION").is_file():
                raise FetchError(f"CRAN tarball for {source.name} has no DESCRIPTION",
                                 error_code="not_a_package")
        except Exception:
            temp_dir.cleanup()
            raise

        logger.info(f"Fetched {source.name} {version} from CRAN")
        return FetchedPackage(root, source.name, version, temp_dir)

    def _fetch_pypi(self, source: PackageSource) -> FetchedPackage:
        if source.ref:
            url = NETWORK.PYPI_RELEASE_JSON.format(index=self.pypi_index, name=source.name, version=source.ref)
        else:
            url = NETWORK.PYPI_JSON.format(index=self.pypi_index, name=source.name)
        try:
            release = self._get(url).json()
        except ValueError as e:
            raise FetchError(f"PyPI returned invalid JSON for {source.name}: {e}",
                             error_code="bad_response") from e

        info = release.get("info") if isinstance(release, dict) else None
        sdist = select_sdist(release) if isinstance(release, dict) else None
        if sdist is None:
            raise FetchError(
                f"No source distribution of '{source.name}' on PyPI",
                suggestions=["Use github:owner/repo to extract from the repository",
                             "Use --installed to introspect an installed copy"],
                error_code="no_sdist"
            )
        version = (info or {}).get("version") or source.ref

        temp_dir = tempfile.TemporaryDirectory(prefix="pkgctx-")
        try:
            filename = Path(sdist.get("filename") or "source.tar.gz").name
            archive = Path(temp_dir.name) / filename
            self._download(sdist["url"], archive)
            extracted = Path(temp_dir.name) / "source"
            self._unpack(archive, extracted)
            root = _python_root(extracted)
        except Exception:
            temp_dir.cleanup()
            raise

        logger.info(f"Fetched {source.name} {version or 'unknown version'} from PyPI")
        return FetchedPackage(root, source.name, version, temp_dir)

    def _fetch_github(self, source: PackageSource) -> FetchedPackage:
        url = NETWORK.GITHUB_ARCHIVE.format(
            owner=source.owner, repo=source.name, ref=source.ref or NETWORK.DEFAULT_REF
        )
        temp_dir = tempfile.TemporaryDirectory(prefix="pkgctx-")
        try:
            archive = Path(temp_dir.name) / "source.tar.gz"
            self._download(url, archive)
            extracted = Path(temp_dir.name) / "source"
            self._unpack(archive, extracted)
            if source.language == PYTHON:
                root = _python_root(extracted)
            else:
                root = find_package_root(extracted)
            if root is None:
                raise FetchError(
                    f"No DESCRIPTION file found in {source.owner}/{source.name}",
                    suggestions=["Packages in a repository subdirectory are not supported"],
                    error_code="not_a_package"
                )
        except Exception:
            temp_dir.cleanup()
            raise

        version = _source_version(root, source.language)
        logger.info(f"Fetched {source.owner}/{source.name} ({version or 'unknown version'}) from GitHub")
        return FetchedPackage(root, source.name, version, temp_dir)

    def _get(self, url: str) -> requests.Response:
        logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise FetchError(
                    f"Not found: {url}",
                    suggestions=["Check the package name and version"],
                    error_code="not_found"
                ) from e
            raise FetchError(
                f"Request failed for {url}: {e}",
                suggestions=["Check your network connection"],
                error_code="network"
            ) from e
        except requests.RequestException as e:
            raise FetchError(
                f"Request failed for {url}: {e}",
                suggestions=["Check your network connection", "Try another mirror in the config file"],
                error_code="network"
            ) from e
        return response

    def _download(self, url: str, destination: Path) -> None:
        logger.debug(f"Downloading {url}")
        try:
            with self.session.get(url, timeout=self.timeout, stream=True) as response:
                response.raise_for_status()
                with open(destination, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                        f.write(chunk)
        except requests.RequestException as e:
            raise FetchError(
                f"Download failed for {url}: {e}",
                suggestions=["Check your network connection"],
                error_code="network"
            ) from e

    @staticmethod
    def _unpack(archive: Path, destination: Path) -> None:
        """Unpack a tar archive (any compression) or a zip file."""
        destination.mkdir(parents=True, exist_ok=True)
        try:
            if zipfile.is_zipfile(archive):
                with zipfile.ZipFile(archive) as zf:
                    zf.extractall(destination)
                return
            with tarfile.open(archive, "r:*") as tar:
                if hasattr(tarfile, "data_filter"):
                    tar.extractall(destination, filter="data")
                else:
                    tar.extractall(destination)
        except (tarfile.TarError, zipfile.BadZipFile, OSError) as e:
            raise FetchError(f"Could not unpack {archive.name}: {e}", error_code="bad_archive") from e


def fetch_package(spec: str, cran_mirror: str = NETWORK.CRAN_MIRROR,
                  timeout: int = NETWORK.TIMEOUT, language: str = R) -> FetchedPackage:
    """Parse ``spec`` and fetch the package it names."""
    return PackageFetcher(cran_mirror, timeout).fetch(parse_package_spec(spec, language))
