"""Data model for a (possibly nested) installed package identity."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from constants import Constants


@dataclass(frozen=True)
class PackageIdentity:
    """A package addressed by its nesting chain, root-first and leaf-last.

    ``version`` and the sequence fields are only known for identities parsed
    from a patch filename.
    """
    package_names: Tuple[str, ...]
    version: Optional[str] = None
    sequence_number: Optional[int] = None
    sequence_name: Optional[str] = None
    is_dev_only: bool = False
    patch_filename: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "package_names", tuple(self.package_names))
        if not self.package_names:
            raise ValueError("package_names must not be empty")
        if self.sequence_name is not None and self.sequence_number is None:
            raise ValueError("sequence_name requires sequence_number")
        if self.sequence_number is not None and self.sequence_number < 1:
            # filenames carry it zero-padded, and an all-zero token does not parse
            raise ValueError("sequence_number must be a positive integer")

    @property
    def name(self) -> str:
        return self.package_names[-1]

    @property
    def is_nested(self) -> bool:
        return len(self.package_names) > 1

    @property
    def path(self) -> str:
        """On-disk location relative to the app root, e.g. ``node_modules/a/node_modules/b``."""
        nested = f"/{Constants.NODE_MODULES}/".join(self.package_names)
        return f"{Constants.NODE_MODULES}/{nested}"

    @property
    def root_package_path(self) -> str:
        return f"{Constants.NODE_MODULES}/{self.package_names[0]}"

    @property
    def path_specifier(self) -> str:
        return "/".join(self.package_names)

    @property
    def human_readable_path_specifier(self) -> str:
        return " => ".join(self.package_names)

    def __str__(self) -> str:
        if self.version:
            return f"{self.human_readable_path_specifier}@{self.version}"
        return self.human_readable_path_specifier
