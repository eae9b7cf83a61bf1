"""Command line entry point: ``pkgctx r <package>`` and ``pkgctx python <package>``."""

import argparse
import sys
from typing import Any, Dict, List, Optional

from pkgctx.config import APP, DEFAULTS, parse_arguments
from pkgctx.data_models import ExtractOptions, Record
from pkgctx.extractors.python.introspection import PythonIntrospectionExtractor
from pkgctx.extractors.r.introspection import RIntrospectionExtractor
from pkgctx.fetch import PYTHON, R, PackageFetcher, parse_package_spec
from pkgctx.output import render
from pkgctx.package_extractor import PythonSourcePackageExtractor, RSourcePackageExtractor
from pkgctx.transforms import compact_records, hoist_common_args
from pkgctx.utils import Logger, PkgctxError, get_logger, graceful_error, report_error, write_file
from pkgctx.utils.config_loader import ConfigLoader
from pkgctx.utils.error_handler import ConfigurationError


def create_overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Map command line flags onto ExtractOptions fields; unset flags are None."""
    return {
        'include_internal': args.include_internal,
        'max_examples': args.max_examples,
        'compact': args.compact,
        'hoist_common_args': args.hoist_common_args,
        'output_format': args.format,
        'emit_classes': getattr(args, 'emit_classes', None),
    }


def setup_logging(args: argparse.Namespace, loader: ConfigLoader):
    """Initialize the package logger from flags and the config file."""
    level = (args.log_level or loader.get_log_level()).upper()
    if level not in APP.log_levels:
        raise ConfigurationError(
            f"Unknown log level: {level}",
            suggestions=[f"Use one of: {', '.join(APP.log_levels)}"],
            error_code="bad_config"
        )
    logging_config = loader.get_logging_config()
    return get_logger(
        level=level,
        log_to_file=bool(logging_config.get('log_to_file', False)),
        log_dir=str(logging_config.get('log_dir', DEFAULTS.LOG_DIR))
    )


def extract_records(spec: str, options: ExtractOptions, loader: ConfigLoader,
                    installed: bool = False, language: str = R) -> List[Record]:
    """Extract and post-process records for one package.

    Args:
        spec: Package spec, or an installed package name when ``installed``
        options: Resolved extraction options
        loader: Configuration for network settings
        installed: Introspect the installed package instead of fetching sources
        language: ``r`` or ``python``

    Returns:
        Package record followed by function (and class) records
    """
    if installed:
        introspector = PythonIntrospectionExtractor() if language == PYTHON else RIntrospectionExtractor()
        records = introspector.extract(spec, options)
    else:
        source = parse_package_spec(spec, language)
        fetcher = PackageFetcher(loader.get_cran_mirror(), loader.get_timeout(),
                                 pypi_index=loader.get_pypi_index())
        extractor = PythonSourcePackageExtractor(options) if language == PYTHON else RSourcePackageExtractor(options)
        with fetcher.fetch(source) as package:
            records = extractor.extract(package)

    if options.compact:
        records = compact_records(records)
    if options.hoist_common_args:
        records = hoist_common_args(records)
    return records


@graceful_error
def run(args: argparse.Namespace) -> int:
    """Run one extraction described by parsed arguments."""
    loader = ConfigLoader(args.config)
    logger = setup_logging(args, loader)
    options = loader.build_extract_options(create_overrides_from_args(args))

    logger.info(f"Extracting {args.package} ({'installed' if args.installed else 'source'})")
    records = extract_records(args.package, options, loader, installed=args.installed,
                              language=args.language)
    logger.info(Logger.format_record_summary(records))

    text = render(records, options.output_format)
    if args.output:
        if not write_file(args.output, text):
            raise PkgctxError(f"Could not write {args.output}", error_code="write_failed")
        logger.info(f"Wrote {args.output}")
    else:
        sys.stdout.write(text)
    return APP.EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI tool."""
    args = parse_arguments(argv)
    try:
        return run(args)
    except PkgctxError as e:
        report_error(e)
        return APP.EXIT_FAILURE
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return APP.EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
