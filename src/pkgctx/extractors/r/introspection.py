"""Installed-package extraction through an ``Rscript`` subprocess.

R loads the package namespace, reads ``formals()`` and the Rd database and
prints one JSON document between two marker lines. Everything R prints
outside the markers (startup messages, warnings) is ignored.
"""

import json
import shutil
import subprocess
from typing import Any, Dict, List, Optional
import logging

from pkgctx.config.constants import DEFAULTS, NETWORK
from pkgctx.data_models import Example, ExtractOptions, FunctionRecord, PackageRecord, Record
from pkgctx.extractors.r.metadata import is_package_name
from pkgctx.extractors.rd.example_segmenter import segment_examples
from pkgctx.utils.error_handler import IntrospectionError

logger = logging.getLogger(__name__)

JSON_START = "<<<PKGCTX_JSON_START>>>"
JSON_END = "<<<PKGCTX_JSON_END>>>"

_SCRIPT = r'''
suppressPackageStartupMessages(library(jsonlite))

clean <- function(x) {
  if (is.null(x) || length(x) == 0) return(NULL)
  x <- gsub("[[:cntrl:]]", " ", as.character(x))
  trimws(gsub("\\s+", " ", x))
}

rd_fields <- function(rd) {
  out <- list(arguments = list())
  if (is.null(rd)) return(out)
  for (section in rd) {
    tag <- attr(section, "Rd_tag")
    if (is.null(tag)) next
    text <- clean(paste(unlist(section), collapse = ""))
    if (tag == "\\title") out$title <- text
    else if (tag == "\\value") out$value <- text
    else if (tag == "\\examples") out$examples <- paste(unlist(section), collapse = "")
    else if (tag == "\\arguments") {
      for (item in section) {
        if (identical(attr(item, "Rd_tag"), "\\item") && length(item) >= 2) {
          key <- paste(unlist(item[[1]]), collapse = "")
          out$arguments[[key]] <- clean(paste(unlist(item[[2]]), collapse = ""))
        }
      }
    }
  }
  out
}

deparse_default <- function(value) {
  if (missing(value) || identical(value, quote(expr = ))) return(NULL)
  paste(deparse(value, width.cutoff = 500L), collapse = " ")
}

pkg <- "%(package)s"
if (!requireNamespace(pkg, quietly = TRUE)) stop(paste("Package", pkg, "not found"))
ns <- asNamespace(pkg)
desc <- packageDescription(pkg)
exports <- getNamespaceExports(pkg)
candidates <- if (%(include_internal)s) ls(ns, all.names = TRUE) else exports
candidates <- Filter(function(n) tryCatch(is.function(get(n, envir = ns)), error = function(e) FALSE),
                     sort(candidates))
rd_db <- tryCatch(tools::Rd_db(pkg), error = function(e) NULL)
find_rd <- function(n) {
  if (is.null(rd_db)) return(NULL)
  for (key in c(n, paste0(n, ".Rd"))) if (key %%in%% names(rd_db)) return(rd_db[[key]])
  NULL
}

functions <- lapply(candidates, function(fn) {
  params <- formals(get(fn, envir = ns))
  doc <- rd_fields(find_rd(fn))
  args <- lapply(names(params), function(a) {
    list(name = a, default = deparse_default(params[[a]]), description = doc$arguments[[a]])
  })
  shown <- vapply(names(params), function(a) {
    d <- deparse_default(params[[a]])
    if (is.null(d)) a else paste0(a, " = ", d)
  }, character(1))
  examples <- if (is.null(doc$examples)) list() else list(trimws(doc$examples))
  list(name = fn, exported = fn %%in%% exports,
       signature = paste0(fn, "(", paste(shown, collapse = ", "), ")"),
       arguments = args, title = doc$title, returns = doc$value, examples = examples)
})

result <- list(name = pkg, version = as.character(desc$Version),
               title = clean(desc$Title), description = clean(desc$Description),
               functions = functions)
cat("%(start)s")
cat(toJSON(result, auto_unbox = TRUE, null = "null"))
cat("%(end)s")
'''


def build_script(package: str, include_internal: bool) -> str:
    """Render the introspection R script for one package.

    Raises:
        IntrospectionError: If ``package`` is not a valid R package name
    """
    if not is_package_name(package):
        raise IntrospectionError(
            f"Invalid installed package name: '{package}'",
            suggestions=["--installed takes a bare package name such as 'stats'"],
            error_code="bad_spec"
        )
    return _SCRIPT % {
        'package': package,
        'include_internal': "TRUE" if include_internal else "FALSE",
        'start': JSON_START,
        'end': JSON_END,
    }


def extract_payload(stdout: str) -> Dict[str, Any]:
    """Decode the JSON document printed between the markers.

    Raises:
        IntrospectionError: If a marker is missing or the JSON is invalid
    """
    start = stdout.find(JSON_START)
    end = stdout.find(JSON_END, start + len(JSON_START)) if start != -1 else -1
    if start == -1 or end == -1:
        raise IntrospectionError(
            "R introspection produced no result markers",
            suggestions=["Run the package load in R directly to see its messages"],
            error_code="introspection_output"
        )
    try:
        payload = json.loads(stdout[start + len(JSON_START):end])
    except json.JSONDecodeError as e:
        raise IntrospectionError(
            f"R introspection returned invalid JSON: {e}",
            error_code="introspection_output"
        ) from e
    if not isinstance(payload, dict):
        raise IntrospectionError("R introspection returned a non-object document",
                                 error_code="introspection_output")
    return payload


def _function_record(info: Dict[str, Any], max_examples: int) -> FunctionRecord:
    arguments: Dict[str, str] = {}
    for argument in info.get('arguments') or []:
        description = argument.get('description')
        if not description and argument.get('default') is not None:
            description = f"default: {argument['default']}"
        if description:
            arguments[argument['name']] = description

    examples: List[Example] = []
    for text in info.get('examples') or []:
        if text and len(examples) < max_examples:
            blocks = segment_examples(text, max_examples - len(examples))
            examples.extend(Example(code=block.code) for block in blocks)
    return FunctionRecord(
        name=info['name'],
        exported=bool(info.get('exported', False)),
        signature=info.get('signature') or f"{info['name']}()",
        purpose=info.get('title'),
        arguments=arguments,
        returns=info.get('returns'),
        examples=examples
    )


def payload_to_records(payload: Dict[str, Any], max_examples: int = DEFAULTS.MAX_EXAMPLES) -> List[Record]:
    """Convert the introspection document to records.

    Args:
        payload: Decoded JSON document
        max_examples: Cap on examples per function

    Returns:
        Package record followed by function records
    """
    try:
        records: List[Record] = [PackageRecord(
            name=payload['name'],
            version=payload.get('version') or "unknown",
            description=payload.get('title') or payload.get('description')
        )]
        for info in payload.get('functions') or []:
            records.append(_function_record(info, max_examples))
    except (KeyError, TypeError, AttributeError) as e:
        raise IntrospectionError(
            f"R introspection document has an unexpected shape: {e}",
            error_code="introspection_output"
        ) from e
    return records


class RIntrospectionExtractor:
    """Extracts records for a package installed in the local R library."""

    def __init__(self, rscript: str = "Rscript", timeout: Optional[int] = NETWORK.TIMEOUT * 5):
        self.rscript = rscript
        self.timeout = timeout

    def extract(self, package: str, options: Optional[ExtractOptions] = None) -> List[Record]:
        """Introspect an installed package.

        Args:
            package: Installed package name
            options: Extraction options

        Returns:
            Package record followed by function records

        Raises:
            IntrospectionError: If R is unavailable or the subprocess fails
        """
        options = options or ExtractOptions()
        script = build_script(package, options.include_internal)
        executable = shutil.which(self.rscript)
        if executable is None:
            raise IntrospectionError(
                f"{self.rscript} not found in PATH",
                suggestions=["Install R", "Drop --installed to extract from package sources"],
                error_code="r_not_found"
            )

        cmd = [executable, "--vanilla", "-e", script]
        logger.debug(f"Running R introspection for {package}")
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise IntrospectionError(f"R introspection timed out after {self.timeout}s",
                                     error_code="introspection_timeout") from e

        if result.returncode != 0:
            stderr = result.stderr.decode(errors="ignore").strip()
            raise IntrospectionError(
                f"R introspection failed: {stderr}",
                suggestions=[f"Check that {package} and jsonlite are installed"],
                error_code="introspection_failed"
            )

        payload = extract_payload(result.stdout.decode(errors="ignore"))
        records = payload_to_records(payload, options.max_examples)
        logger.info(f"Introspected {package}: {len(records) - 1} functions")
        return records
