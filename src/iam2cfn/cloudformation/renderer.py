"""
Render IAM inventories as CloudFormation YAML templates.

Each resource kind has its own Jinja2 template under ``templates/``. Policy
documents are embedded as the two-space indented JSON produced by the
normalizer, which YAML reads as a flow mapping.
"""

import logging
import random
from typing import Any, Dict, List, NamedTuple, Optional, TextIO, Union

import jinja2
import yaml

from ..exceptions import RenderError
from ..iam.models import Inventory, Record, ResourceKind
from ..naming import NamingMode, logical_ids, policy_name

logger = logging.getLogger(__name__)

TEMPLATES: Dict[ResourceKind, str] = {
    ResourceKind.GROUPS: "groups.yaml.j2",
    ResourceKind.POLICIES: "policies.yaml.j2",
    ResourceKind.ROLES: "roles.yaml.j2",
}

_DOCUMENT_END = "\n...\n"


def yaml_scalar(value: Any) -> str:
    """Render a scalar so it reads back as the same value on one YAML line."""
    style = '"' if isinstance(value, str) and ("\n" in value or "\r" in value) else None
    text = yaml.safe_dump(
        value,
        default_style=style,
        default_flow_style=True,
        allow_unicode=True,
        width=float("inf"),
    )
    if text.endswith(_DOCUMENT_END):
        text = text[: -len(_DOCUMENT_END)]
    return text.rstrip("\n")


def get_jinja_env() -> jinja2.Environment:
    """Jinja2 environment loading the bundled resource templates."""
    env = jinja2.Environment(
        loader=jinja2.PackageLoader("iam2cfn", "cloudformation/templates"),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
        autoescape=False,
    )
    env.filters["yaml_scalar"] = yaml_scalar
    return env


class TemplateEntry(NamedTuple):
    """One resource in the rendered template."""

    logical_id: str
    record: Record
    generated_name: Optional[str] = None


class TemplateRenderer:
    """Render an inventory into a CloudFormation YAML document."""

    def __init__(
        self,
        naming: Union[NamingMode, str] = NamingMode.SANITIZED,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the renderer.

        Args:
            naming: Naming mode for logical IDs and generated policy names
            rng: Source of policy name suffixes. Pass a seeded instance for
                reproducible output.
        """
        self.naming = NamingMode(naming)
        self.rng = rng if rng is not None else random.Random()
        self.env = get_jinja_env()

    def entries(self, inventory: Inventory) -> List[TemplateEntry]:
        """Assign logical IDs (and generated names for policies) to records."""
        try:
            keys = logical_ids((r.name for r in inventory.records), self.naming)
        except ValueError as e:
            raise RenderError(str(e)) from e

        entries = []
        for key, record in zip(keys, inventory.records):
            generated = None
            if inventory.kind is ResourceKind.POLICIES:
                generated = policy_name(record.name, self.naming, self.rng)
            entries.append(TemplateEntry(key, record, generated))
        return entries

    def render(self, inventory: Inventory) -> str:
        """
        Render the inventory.

        Args:
            inventory: Records of a single kind

        Returns:
            YAML template text with one resource per record, in input order

        Raises:
            RenderError: If the kind has no template or rendering fails
        """
        template_name = TEMPLATES.get(inventory.kind)
        if template_name is None:
            raise RenderError(f"Unknown resource kind: {inventory.kind!r}")

        try:
            template = self.env.get_template(template_name)
            output = template.render(
                entries=self.entries(inventory),
                resource_type=inventory.kind.resource_type,
            )
        except jinja2.TemplateError as e:
            raise RenderError(f"Failed to render {inventory.kind.value}: {e}") from e

        logger.debug(f"Rendered {len(inventory)} {inventory.kind.value}")
        return output

    def write(self, inventory: Inventory, stream: TextIO) -> None:
        """Render the whole inventory, then write it to ``stream``."""
        stream.write(self.render(inventory))
