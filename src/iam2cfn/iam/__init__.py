"""
IAM inventory: record types, policy document normalization and fetching.
"""

from .documents import indent_policy_json, normalize_policy_document
from .fetcher import IAMInventoryFetcher, create_iam_client
from .models import (
    GroupRecord,
    Inventory,
    PolicyRecord,
    ResourceKind,
    RoleRecord,
    Tag,
)

__all__ = [
    "GroupRecord",
    "IAMInventoryFetcher",
    "Inventory",
    "PolicyRecord",
    "ResourceKind",
    "RoleRecord",
    "Tag",
    "create_iam_client",
    "indent_policy_json",
    "normalize_policy_document",
]
