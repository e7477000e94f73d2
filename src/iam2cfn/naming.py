"""
Naming utilities for CloudFormation logical IDs and generated resource names.

CloudFormation logical IDs must be alphanumeric, while IAM names may contain
``+=,.@_-``. In sanitized mode the IAM name is camel-cased into a logical ID
and generated policy names get a random numeric suffix, because CloudFormation
cannot adopt an existing group or policy under its current name.
"""

import random
import re
from enum import Enum
from typing import Dict, Iterable, List, Optional


class NamingMode(Enum):
    """How records are keyed in the rendered template."""

    SANITIZED = "sanitized"
    PLAIN = "plain"

    @classmethod
    def choices(cls) -> List[str]:
        return [mode.value for mode in cls]


class LogicalIdConvention:
    """Derives logical IDs and generated names from IAM resource names."""

    SEPARATOR_PATTERN = re.compile(r"[^A-Za-z0-9]+")
    LOGICAL_ID_PATTERN = re.compile(r"^[A-Za-z0-9]+$")

    # Go's rand.Int range, kept so suffixes look the same as before
    SUFFIX_BITS = 63

    @classmethod
    def sanitize(cls, name: str) -> str:
        """
        Convert an IAM name into an alphanumeric logical ID.

        Args:
            name: IAM resource name (e.g., "my-group_name")

        Returns:
            Camel-cased logical ID (e.g., "MyGroupName"). Names without
            separators are returned unchanged.

        Raises:
            ValueError: If the name has no alphanumeric characters
        """
        if cls.validate_logical_id(name):
            return name

        parts = [p for p in cls.SEPARATOR_PATTERN.split(name) if p]
        if not parts:
            raise ValueError(f"Cannot derive a logical ID from name: {name!r}")
        return "".join(p[0].upper() + p[1:] for p in parts)

    @classmethod
    def validate_logical_id(cls, logical_id: str) -> bool:
        """Check whether a logical ID is acceptable to CloudFormation."""
        return bool(cls.LOGICAL_ID_PATTERN.match(logical_id))

    @classmethod
    def random_suffix(cls, rng: random.Random) -> str:
        """Random non-negative integer rendered as a string."""
        return str(rng.getrandbits(cls.SUFFIX_BITS))

    @classmethod
    def generated_name(cls, name: str, rng: random.Random) -> str:
        """Name with a random suffix, e.g. "ReadOnly-8674665223082153551"."""
        return f"{name}-{cls.random_suffix(rng)}"


def logical_ids(names: Iterable[str], mode: NamingMode) -> List[str]:
    """
    Assign a unique template key to each name, preserving order.

    Keys that collide (e.g. "my-role" and "my_role" both sanitize to
    "MyRole") get 2, 3, ... appended.

    Args:
        names: IAM resource names in template order
        mode: Naming mode

    Returns:
        One key per name
    """
    keys: List[str] = []
    seen: Dict[str, int] = {}
    for name in names:
        key = LogicalIdConvention.sanitize(name) if mode is NamingMode.SANITIZED else name
        if key in seen:
            seen[key] += 1
            candidate = f"{key}{seen[key]}"
            while candidate in seen:
                seen[key] += 1
                candidate = f"{key}{seen[key]}"
            key = candidate
        seen[key] = 1
        keys.append(key)
    return keys


def sanitize(name: str) -> str:
    """Convenience wrapper for LogicalIdConvention.sanitize."""
    return LogicalIdConvention.sanitize(name)


def policy_name(name: str, mode: NamingMode, rng: Optional[random.Random] = None) -> str:
    """Name to give a generated managed policy in the given mode."""
    if mode is NamingMode.PLAIN:
        return name
    return LogicalIdConvention.generated_name(name, rng or random.Random())
