"""
IAM inventory fetching.

Lists groups, customer managed policies and roles through boto3 and turns
each API response into a record. Pagination is left to botocore paginators.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import FetchError
from .documents import normalize_policy_document
from .models import (
    GroupRecord,
    Inventory,
    PolicyRecord,
    ResourceKind,
    RoleRecord,
    Tag,
)

logger = logging.getLogger(__name__)


def create_iam_client(profile: Optional[str] = None, region: Optional[str] = None) -> Any:
    """
    Create an IAM client using the default credential chain.

    Args:
        profile: AWS profile to use
        region: AWS region

    Returns:
        boto3 IAM client
    """
    session_args = {}
    if profile:
        session_args["profile_name"] = profile
    if region:
        session_args["region_name"] = region

    try:
        session = boto3.Session(**session_args)
        return session.client("iam")
    except (ClientError, BotoCoreError) as e:
        raise FetchError("client setup", e) from e


def _tags(items: List[Dict[str, str]]) -> Tuple[Tag, ...]:
    return tuple(Tag(key=t["Key"], value=t["Value"]) for t in items)


class IAMInventoryFetcher:
    """Fetch IAM resources of one kind and build records from them."""

    def __init__(self, client: Any, fetch_tags: bool = True):
        """
        Initialize the fetcher.

        Args:
            client: boto3 IAM client
            fetch_tags: Read role and policy tags with list_*_tags when the
                listing does not include them
        """
        self.iam = client
        self.fetch_tags = fetch_tags

    def _call(self, operation: str, **kwargs: Any) -> Dict[str, Any]:
        """Call a single IAM operation, wrapping botocore errors."""
        try:
            return getattr(self.iam, operation)(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise FetchError(operation, e) from e

    def _paginate(self, operation: str, key: str, **kwargs: Any) -> Iterator[Any]:
        """Yield every item under ``key`` across all pages of an operation."""
        try:
            paginator = self.iam.get_paginator(operation)
            for page in paginator.paginate(**kwargs):
                for item in page.get(key, []):
                    yield item
        except (ClientError, BotoCoreError) as e:
            raise FetchError(operation, e) from e

    def fetch(self, kind: ResourceKind) -> Inventory:
        """Fetch every resource of the given kind."""
        fetchers = {
            ResourceKind.GROUPS: self.fetch_groups,
            ResourceKind.POLICIES: self.fetch_policies,
            ResourceKind.ROLES: self.fetch_roles,
        }
        records = fetchers[kind]()
        logger.info(f"Fetched {len(records)} {kind.value}")
        return Inventory(kind=kind, records=tuple(records))

    # Groups

    def fetch_groups(self) -> List[GroupRecord]:
        """List groups with their attached and inline policies."""
        groups: List[GroupRecord] = []
        for group in self._paginate("list_groups", "Groups"):
            name = group["GroupName"]
            logger.debug(f"Fetching group {name}")

            arns = tuple(
                p["PolicyArn"]
                for p in self._paginate(
                    "list_attached_group_policies", "AttachedPolicies", GroupName=name
                )
            )

            groups.append(
                GroupRecord(
                    name=name,
                    path=group.get("Path", "/"),
                    managed_policy_arns=arns,
                    policies=self._group_inline_policies(name),
                )
            )
        return groups

    def _group_inline_policies(self, group_name: str) -> Tuple[PolicyRecord, ...]:
        policies = []
        for policy_name in self._paginate(
            "list_group_policies", "PolicyNames", GroupName=group_name
        ):
            response = self._call(
                "get_group_policy", GroupName=group_name, PolicyName=policy_name
            )
            policies.append(
                PolicyRecord(
                    name=response["PolicyName"],
                    policy_document=normalize_policy_document(response["PolicyDocument"]),
                )
            )
        return tuple(policies)

    # Customer managed policies

    def fetch_policies(self) -> List[PolicyRecord]:
        """List customer managed policies with their default version document."""
        policies: List[PolicyRecord] = []
        for policy in self._paginate("list_policies", "Policies", Scope="Local"):
            name = policy["PolicyName"]
            logger.debug(f"Fetching policy {name}")

            response = self._call(
                "get_policy_version",
                PolicyArn=policy["Arn"],
                VersionId=policy["DefaultVersionId"],
            )
            document = normalize_policy_document(response["PolicyVersion"]["Document"])

            tags = policy.get("Tags")
            if tags is None and self.fetch_tags:
                tags = list(self._paginate("list_policy_tags", "Tags", PolicyArn=policy["Arn"]))

            policies.append(
                PolicyRecord(
                    name=name,
                    policy_document=document,
                    description=policy.get("Description") or None,
                    path=policy.get("Path", "/"),
                    tags=_tags(tags or []),
                )
            )
        return policies

    # Roles

    def fetch_roles(self) -> List[RoleRecord]:
        """List roles with trust policy, attached and inline policies."""
        roles: List[RoleRecord] = []
        for role in self._paginate("list_roles", "Roles"):
            name = role["RoleName"]
            logger.debug(f"Fetching role {name}")

            trust_policy = normalize_policy_document(role["AssumeRolePolicyDocument"])

            arns = tuple(
                p["PolicyArn"]
                for p in self._paginate(
                    "list_attached_role_policies", "AttachedPolicies", RoleName=name
                )
            )

            tags = role.get("Tags")
            if tags is None and self.fetch_tags:
                tags = list(self._paginate("list_role_tags", "Tags", RoleName=name))

            roles.append(
                RoleRecord(
                    name=name,
                    path=role.get("Path", "/"),
                    assume_role_policy_document=trust_policy,
                    description=role.get("Description") or None,
                    max_session_duration=role.get("MaxSessionDuration"),
                    managed_policy_arns=arns,
                    policies=self._role_inline_policies(name),
                    tags=_tags(tags or []),
                )
            )
        return roles

    def _role_inline_policies(self, role_name: str) -> Tuple[PolicyRecord, ...]:
        policies = []
        for policy_name in self._paginate(
            "list_role_policies", "PolicyNames", RoleName=role_name
        ):
            response = self._call(
                "get_role_policy", RoleName=role_name, PolicyName=policy_name
            )
            policies.append(
                PolicyRecord(
                    name=response["PolicyName"],
                    policy_document=normalize_policy_document(response["PolicyDocument"]),
                )
            )
        return tuple(policies)
