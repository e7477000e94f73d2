"""
Build IAM inventories as troposphere templates for JSON output.

troposphere only accepts alphanumeric titles, so logical IDs are always
sanitized here regardless of the YAML naming mode.
"""

import json
import logging
import random
from typing import Any, Callable, Dict, List, Optional

from troposphere import Template, iam

from ..exceptions import RenderError
from ..iam.models import GroupRecord, Inventory, PolicyRecord, ResourceKind, RoleRecord
from ..naming import NamingMode, logical_ids, policy_name

logger = logging.getLogger(__name__)

TEMPLATE_VERSION = "2010-09-09"


def _inline_policies(records) -> List[iam.Policy]:
    return [
        iam.Policy(
            PolicyName=p.name,
            PolicyDocument=json.loads(p.policy_document),
        )
        for p in records
    ]


def _tags(record) -> List[Dict[str, str]]:
    return [{"Key": t.key, "Value": t.value} for t in record.tags]


def _group(title: str, group: GroupRecord, rng: random.Random) -> iam.Group:
    props: Dict[str, Any] = {"Path": group.path}
    if group.managed_policy_arns:
        props["ManagedPolicyArns"] = list(group.managed_policy_arns)
    if group.policies:
        props["Policies"] = _inline_policies(group.policies)
    return iam.Group(title, **props)


def _managed_policy(title: str, policy: PolicyRecord, rng: random.Random) -> iam.ManagedPolicy:
    props: Dict[str, Any] = {
        "ManagedPolicyName": policy_name(policy.name, NamingMode.SANITIZED, rng),
        "Path": policy.path,
        "PolicyDocument": json.loads(policy.policy_document),
    }
    if policy.description:
        props["Description"] = policy.description
    if policy.tags:
        logger.warning(
            f"AWS::IAM::ManagedPolicy does not support Tags, dropping "
            f"{len(policy.tags)} tag(s) from {policy.name}"
        )
    return iam.ManagedPolicy(title, **props)


def _role(title: str, role: RoleRecord, rng: random.Random) -> iam.Role:
    props: Dict[str, Any] = {
        "AssumeRolePolicyDocument": json.loads(role.assume_role_policy_document),
        "Path": role.path,
    }
    if role.description:
        props["Description"] = role.description
    if role.managed_policy_arns:
        props["ManagedPolicyArns"] = list(role.managed_policy_arns)
    if role.max_session_duration:
        props["MaxSessionDuration"] = role.max_session_duration
    if role.tags:
        props["Tags"] = _tags(role)
    if role.policies:
        props["Policies"] = _inline_policies(role.policies)
    return iam.Role(title, **props)


BUILDERS: Dict[ResourceKind, Callable[[str, Any, random.Random], Any]] = {
    ResourceKind.GROUPS: _group,
    ResourceKind.POLICIES: _managed_policy,
    ResourceKind.ROLES: _role,
}


def build_template(inventory: Inventory, rng: Optional[random.Random] = None) -> Template:
    """
    Build a troposphere template holding one resource per record.

    Args:
        inventory: Records of a single kind
        rng: Source of generated policy name suffixes

    Returns:
        troposphere Template

    Raises:
        RenderError: If the kind is unknown or a resource fails validation
    """
    builder = BUILDERS.get(inventory.kind)
    if builder is None:
        raise RenderError(f"Unknown resource kind: {inventory.kind!r}")
    rng = rng if rng is not None else random.Random()

    template = Template()
    template.set_version(TEMPLATE_VERSION)
    try:
        titles = logical_ids((r.name for r in inventory.records), NamingMode.SANITIZED)
        for title, record in zip(titles, inventory.records):
            template.add_resource(builder(title, record, rng))
    except (TypeError, ValueError) as e:
        raise RenderError(f"Failed to build {inventory.kind.value}: {e}") from e
    return template


def render_json(inventory: Inventory, rng: Optional[random.Random] = None) -> str:
    """Render the inventory as a JSON CloudFormation template."""
    return build_template(inventory, rng).to_json(indent=2, sort_keys=False) + "\n"
