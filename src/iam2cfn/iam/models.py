"""
Record types for exported IAM resources.

Every record is built once from an IAM API response and handed to rendering
unchanged, so all of them are frozen.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class ResourceKind(Enum):
    """Kinds of IAM resources that can be exported."""

    GROUPS = "groups"
    POLICIES = "policies"
    ROLES = "roles"

    @property
    def resource_type(self) -> str:
        """CloudFormation resource type for this kind."""
        return _RESOURCE_TYPES[self]

    @classmethod
    def choices(cls) -> Tuple[str, ...]:
        return tuple(kind.value for kind in cls)


_RESOURCE_TYPES = {
    ResourceKind.GROUPS: "AWS::IAM::Group",
    ResourceKind.POLICIES: "AWS::IAM::ManagedPolicy",
    ResourceKind.ROLES: "AWS::IAM::Role",
}


@dataclass(frozen=True)
class Tag:
    key: str
    value: str


@dataclass(frozen=True)
class PolicyRecord:
    """A customer managed policy, or an inline policy of a group or role.

    Inline policies only carry ``name`` and ``policy_document``.
    """

    name: str
    policy_document: str     # two-space indented JSON
    description: Optional[str] = None
    path: str = "/"
    tags: Tuple[Tag, ...] = ()


@dataclass(frozen=True)
class GroupRecord:
    name: str
    path: str
    managed_policy_arns: Tuple[str, ...] = ()
    policies: Tuple[PolicyRecord, ...] = ()


@dataclass(frozen=True)
class RoleRecord:
    name: str
    path: str
    assume_role_policy_document: str
    description: Optional[str] = None
    max_session_duration: Optional[int] = None  # seconds
    managed_policy_arns: Tuple[str, ...] = ()
    policies: Tuple[PolicyRecord, ...] = ()
    tags: Tuple[Tag, ...] = ()


Record = Union[GroupRecord, PolicyRecord, RoleRecord]


@dataclass(frozen=True)
class Inventory:
    """All records of a single kind, in API response order."""

    kind: ResourceKind
    records: Tuple[Record, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


__all__ = [
    "ResourceKind",
    "Tag",
    "PolicyRecord",
    "GroupRecord",
    "RoleRecord",
    "Record",
    "Inventory",
]
