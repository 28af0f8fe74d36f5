from .logger import setup_logging, get_logger
from .dn_parser import parse_distinguished_name, common_name
from .origin import url_origin, same_origin, is_https
from .output_formatter import OutputFormatter, ResultSerializer, output_formatter

__all__ = [
    "setup_logging",
    "get_logger",
    "parse_distinguished_name",
    "common_name",
    "url_origin",
    "same_origin",
    "is_https",
    "OutputFormatter",
    "ResultSerializer",
    "output_formatter",
]
