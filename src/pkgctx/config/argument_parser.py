"""Argument parsing for the pkgctx command line."""

import argparse
from typing import List, Optional

from .constants import APP, DEFAULTS


class ArgumentParserBuilder:
    """Builder for creating argument parser with fluent interface."""

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog=APP.NAME,
            description="Compile R and Python packages into compact, machine-readable API context",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._get_usage_examples()
        )
        self.parser.add_argument(
            '--version', '-V',
            action='version',
            version=APP.VERSION
        )
        self._subparsers = self.parser.add_subparsers(dest='language', required=True)
        self._add_r_command()
        self._add_python_command()

    def _add_r_command(self) -> None:
        """Add the ``r`` subcommand and its options."""
        r_parser = self._subparsers.add_parser(
            'r',
            help='Extract context from an R package'
        )
        r_parser.add_argument(
            'package',
            type=str,
            help='CRAN name, github:owner/repo[@ref], or a local path'
        )
        self._add_extraction_arguments(r_parser)
        r_parser.add_argument(
            '--installed',
            action='store_true',
            help='Introspect an installed package through Rscript instead of parsing sources'
        )
        self._add_optional_arguments(r_parser)

    def _add_python_command(self) -> None:
        """Add the ``python`` subcommand and its options."""
        python_parser = self._subparsers.add_parser(
            'python',
            help='Extract context from a Python package'
        )
        python_parser.add_argument(
            'package',
            type=str,
            help='PyPI name[==version], github:owner/repo[@ref], or a local path'
        )
        self._add_extraction_arguments(python_parser)
        python_parser.add_argument(
            '--installed',
            action='store_true',
            help='Import an installed package and introspect it instead of parsing sources'
        )
        python_parser.add_argument(
            '--emit-classes',
            action='store_true',
            default=None,
            help='Also emit one record per public class with its methods'
        )
        self._add_optional_arguments(python_parser)

    @staticmethod
    def _add_extraction_arguments(parser: argparse.ArgumentParser) -> None:
        """Add options that shape the extracted records."""
        parser.add_argument(
            '--include-internal',
            action='store_true',
            default=None,
            help='Include non-exported, dot-prefixed and underscore-prefixed functions'
        )
        parser.add_argument(
            '--max-examples',
            type=int,
            default=None,
            help=f'Maximum examples per function (default: {DEFAULTS.MAX_EXAMPLES})'
        )
        parser.add_argument(
            '--compact',
            action='store_true',
            default=None,
            help='Truncate descriptions to one sentence and drop examples'
        )
        parser.add_argument(
            '--hoist-common-args',
            action='store_true',
            default=None,
            help='Move arguments documented in many functions to the package record'
        )

    @staticmethod
    def _add_optional_arguments(parser: argparse.ArgumentParser) -> None:
        """Add output, logging and configuration options."""
        parser.add_argument(
            '--format', '-f',
            type=str,
            choices=['yaml', 'json'],
            default=None,
            help=f'Output format (default: {DEFAULTS.FORMAT})'
        )
        parser.add_argument(
            '--output', '-o',
            type=str,
            default=None,
            help='Write records to this file instead of stdout'
        )
        parser.add_argument(
            '--config', '-c',
            type=str,
            default=None,
            help='YAML configuration file'
        )
        parser.add_argument(
            '--log-level',
            type=str,
            choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
            default=None,
            help=f'Logging level (default: {DEFAULTS.LOG_LEVEL})'
        )

    def _get_usage_examples(self) -> str:
        """Get formatted usage examples."""
        return """
Examples:
  # Extract a CRAN package as YAML
  pkgctx r dplyr

  # Extract a GitHub package at a tag, as JSON
  pkgctx r github:ropensci/rix@v0.9.0 --format json

  # Extract a local source tree including internal helpers
  pkgctx r ./mypackage --include-internal

  # Token-lean output with shared arguments hoisted
  pkgctx r dplyr --compact --hoist-common-args

  # Extract a pinned PyPI release with class records
  pkgctx python requests==2.32.3 --emit-classes

  # Introspect an installed Python package
  pkgctx python json --installed
        """

    def build(self) -> argparse.ArgumentParser:
        """Build and return the configured parser."""
        return self.parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments using builder pattern."""
    parser = ArgumentParserBuilder().build()
    return parser.parse_args(argv)
