"""Package identity model and parsers for patch filenames and CLI specifiers."""

from .models import PackageIdentity
from .parser import (
    format_patch_filename,
    parse_cli_specifier,
    parse_name_and_version,
    parse_patch_filename,
)

__all__ = [
    "PackageIdentity",
    "format_patch_filename",
    "parse_cli_specifier",
    "parse_name_and_version",
    "parse_patch_filename",
]
