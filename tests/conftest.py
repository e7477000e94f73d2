"""
Shared fixtures: a fake boto3 IAM client driven by canned responses.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Union
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError

from iam2cfn.iam.models import GroupRecord, Inventory, PolicyRecord, ResourceKind, RoleRecord, Tag

ADMIN_ARN = "arn:aws:iam::aws:policy/AdministratorAccess"
READONLY_ARN = "arn:aws:iam::aws:policy/ReadOnlyAccess"

# {"Version":"2012-10-17"} as returned by the IAM API
VERSION_DOCUMENT = "%7B%22Version%22%3A%222012-10-17%22%7D"
VERSION_JSON = '{\n  "Version": "2012-10-17"\n}'

TRUST_POLICY = {
    "Version": "2012-10-17",
    "Statement": [
        {
            "Effect": "Allow",
            "Principal": {"Service": "ec2.amazonaws.com"},
            "Action": "sts:AssumeRole",
        }
    ],
}

Pages = Union[List[Dict[str, Any]], Callable[..., List[Dict[str, Any]]]]


def client_error(operation: str, code: str = "AccessDenied") -> ClientError:
    """Build a botocore ClientError for an IAM operation."""
    return ClientError(
        {"Error": {"Code": code, "Message": f"User is not authorized to perform iam:{operation}"}},
        operation,
    )


class FakePaginator:
    """Stands in for a botocore paginator, recording the kwargs it was given."""

    def __init__(self, pages: Pages):
        self._pages = pages
        self.calls: List[Dict[str, Any]] = []

    def paginate(self, **kwargs):
        self.calls.append(kwargs)
        pages = self._pages(**kwargs) if callable(self._pages) else self._pages
        for page in pages:
            yield page


def make_iam_client(
    paginated: Optional[Dict[str, Pages]] = None, **operations: Callable[..., Any]
) -> Mock:
    """
    Create a mock IAM client.

    Args:
        paginated: Pages per paginated operation name, or a callable taking the
            paginate kwargs and returning pages
        **operations: Side effects for direct operations (e.g. get_group_policy)

    Returns:
        Mock client; ``client.paginators`` maps operation name to FakePaginator
    """
    paginated = paginated or {}
    client = Mock()
    client.paginators = {}

    def get_paginator(name: str) -> FakePaginator:
        if name not in paginated:
            raise AssertionError(f"unexpected paginator {name}")
        paginator = client.paginators.setdefault(name, FakePaginator(paginated[name]))
        return paginator

    client.get_paginator.side_effect = get_paginator
    for name, handler in operations.items():
        getattr(client, name).side_effect = handler
    return client


def get_inline_policy(**kwargs: str) -> Dict[str, Any]:
    """get_group_policy / get_role_policy response with the Version document."""
    response = {"PolicyName": kwargs["PolicyName"], "PolicyDocument": VERSION_DOCUMENT}
    response.update({k: v for k, v in kwargs.items() if k in ("GroupName", "RoleName")})
    return response


@pytest.fixture
def admins_client() -> Mock:
    """One group "Admins" with one managed policy and one inline policy."""
    return make_iam_client(
        paginated={
            "list_groups": [{"Groups": [{"GroupName": "Admins", "Path": "/"}]}],
            "list_attached_group_policies": [
                {"AttachedPolicies": [{"PolicyName": "AdministratorAccess", "PolicyArn": ADMIN_ARN}]}
            ],
            "list_group_policies": [{"PolicyNames": ["inline"]}],
        },
        get_group_policy=get_inline_policy,
    )


@pytest.fixture
def admins_inventory() -> Inventory:
    return Inventory(
        kind=ResourceKind.GROUPS,
        records=(
            GroupRecord(
                name="Admins",
                path="/",
                managed_policy_arns=(ADMIN_ARN,),
                policies=(PolicyRecord(name="inline", policy_document=VERSION_JSON),),
            ),
        ),
    )


@pytest.fixture
def policy_inventory() -> Inventory:
    return Inventory(
        kind=ResourceKind.POLICIES,
        records=(
            PolicyRecord(
                name="s3-read_only",
                policy_document=VERSION_JSON,
                description="Read access: reports bucket",
                path="/team/",
                tags=(Tag("owner", "data"), Tag("enabled", "true")),
            ),
            PolicyRecord(name="Billing", policy_document=VERSION_JSON),
        ),
    )


@pytest.fixture
def role_inventory() -> Inventory:
    return Inventory(
        kind=ResourceKind.ROLES,
        records=(
            RoleRecord(
                name="ec2-app.role",
                path="/service-role/",
                assume_role_policy_document=json.dumps(TRUST_POLICY, indent=2),
                description="Application servers",
                max_session_duration=3600,
                managed_policy_arns=(READONLY_ARN,),
                policies=(PolicyRecord(name="logs", policy_document=VERSION_JSON),),
                tags=(Tag("team", "platform"),),
            ),
            RoleRecord(
                name="Bare",
                path="/",
                assume_role_policy_document=json.dumps(TRUST_POLICY, indent=2),
            ),
        ),
    )
