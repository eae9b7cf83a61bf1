"""Configuration management module."""

from .constants import DEFAULTS, LIMITS, NETWORK, APP
from .argument_parser import parse_arguments, ArgumentParserBuilder

__all__ = ['DEFAULTS', 'LIMITS', 'NETWORK', 'APP', 'parse_arguments', 'ArgumentParserBuilder']
