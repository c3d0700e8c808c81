"""Parse package identities out of patch filenames and CLI specifiers.

Patch filename grammar (one ``++``-separated token per nesting level)::

    [@scope+]name[+version[+sequence_number[+sequence_name]]]

Only the last token must carry a version. Examples::

    left-pad+1.3.0.patch
    outer+1.0.0++@scope+inner+2.0.0.dev.patch
    lodash+4.17.21+002+fix-typo.patch
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from typing import List, Optional

from constants import Constants

from .models import PackageIdentity

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(Constants.VERSION_PATTERN)
_SUFFIX_RE = re.compile(r"(\.dev)?\.patch$")


@dataclass
class NameAndVersion:
    """Fields extracted from a single ``+``-separated filename token."""
    package_name: str
    version: Optional[str] = None
    sequence_number: Optional[int] = None
    sequence_name: Optional[str] = None


def _join_name_parts(name_parts: List[str]) -> Optional[str]:
    if len(name_parts) == 1:
        return name_parts[0]
    if len(name_parts) == 2:
        scope, name = name_parts
        return f"{scope}/{name}"
    return None


def _parse_sequence_number(token: str) -> Optional[int]:
    stripped = token.lstrip("0")
    if not stripped.isdigit():
        return None
    return int(stripped)


def parse_name_and_version(token: str) -> Optional[NameAndVersion]:
    """Parse one nesting level of a patch filename.

    Returns:
        NameAndVersion, or None when the token is malformed.
    """
    parts = [p.strip() for p in token.split(Constants.PART_SEPARATOR)]
    parts = [p for p in parts if p]
    if not parts:
        return None
    if len(parts) == 1:
        return NameAndVersion(package_name=parts[0])

    version_index = next(
        (i for i, part in enumerate(parts) if _VERSION_RE.match(part)), None
    )
    if version_index is None:
        # "@scope+name" without a version (outer level of a nested chain)
        package_name = _join_name_parts(parts)
        return NameAndVersion(package_name=package_name) if package_name else None

    package_name = _join_name_parts(parts[:version_index])
    if package_name is None:
        return None
    version = parts[version_index]

    sequence_parts = parts[version_index + 1:]
    if not sequence_parts:
        return NameAndVersion(package_name=package_name, version=version)
    if len(sequence_parts) > 2:
        return None
    sequence_number = _parse_sequence_number(sequence_parts[0])
    if sequence_number is None:
        return None
    sequence_name = sequence_parts[1] if len(sequence_parts) == 2 else None
    return NameAndVersion(
        package_name=package_name,
        version=version,
        sequence_number=sequence_number,
        sequence_name=sequence_name,
    )


def parse_patch_filename(patch_filename: str) -> Optional[PackageIdentity]:
    """Build a PackageIdentity from a ``.patch`` / ``.dev.patch`` filename.

    Any malformed nesting level, or a leaf without a version, rejects the
    whole filename.

    Returns:
        PackageIdentity, or None if the filename cannot be parsed.
    """
    basename = os.path.basename(patch_filename)
    if not _SUFFIX_RE.search(basename):
        logger.debug("Not a patch file: %s", patch_filename)
        return None
    stem = _SUFFIX_RE.sub("", basename)

    levels = []
    for token in stem.split(Constants.NESTING_SEPARATOR):
        parsed = parse_name_and_version(token)
        if parsed is None:
            logger.debug("Invalid package token %r in patch file %s", token, patch_filename)
            return None
        levels.append(parsed)

    leaf = levels[-1]
    if not leaf.version:
        logger.debug("Patch file %s has no version for %s", patch_filename, leaf.package_name)
        return None

    return PackageIdentity(
        package_names=tuple(level.package_name for level in levels),
        version=leaf.version,
        sequence_number=leaf.sequence_number,
        sequence_name=leaf.sequence_name,
        is_dev_only=basename.endswith(Constants.DEV_PATCH_SUFFIX),
        patch_filename=patch_filename,
    )


def parse_cli_specifier(specifier: str) -> Optional[PackageIdentity]:
    """Build a PackageIdentity from a ``/``-delimited CLI specifier.

    ``outer/@scope/inner`` -> ``("outer", "@scope/inner")``. A scope may not
    follow another scope, nor end the specifier.

    Returns:
        PackageIdentity without version information, or None.
    """
    package_names: List[str] = []
    scope: Optional[str] = None
    for segment in specifier.strip().split("/"):
        if not segment:
            logger.debug("Empty segment in package specifier %r", specifier)
            return None
        if segment.startswith("@"):
            if scope:
                logger.debug("Scope %s cannot follow scope %s in %r", segment, scope, specifier)
                return None
            scope = segment
        elif scope:
            package_names.append(f"{scope}/{segment}")
            scope = None
        else:
            package_names.append(segment)

    if scope or not package_names:
        logger.debug("Incomplete package specifier %r", specifier)
        return None
    return PackageIdentity(package_names=tuple(package_names))


def format_patch_filename(identity: PackageIdentity) -> str:
    """Render an identity in the patch filename format read by parse_patch_filename.

    Raises:
        ValueError: If the identity has no version.
    """
    if not identity.version:
        raise ValueError(f"{identity.path_specifier} has no version")
    tokens = [name.replace("/", Constants.PART_SEPARATOR) for name in identity.package_names]
    leaf = [tokens[-1], identity.version]
    if identity.sequence_number is not None:
        leaf.append(str(identity.sequence_number).zfill(Constants.SEQUENCE_NUMBER_WIDTH))
        if identity.sequence_name:
            leaf.append(identity.sequence_name)
    tokens[-1] = Constants.PART_SEPARATOR.join(leaf)
    suffix = Constants.DEV_PATCH_SUFFIX if identity.is_dev_only else Constants.PATCH_SUFFIX
    return Constants.NESTING_SEPARATOR.join(tokens) + suffix
