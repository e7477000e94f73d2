"""
CloudFormation template rendering for exported IAM inventories.
"""

from .builder import build_template, render_json
from .renderer import TemplateRenderer, yaml_scalar

__all__ = ["TemplateRenderer", "build_template", "render_json", "yaml_scalar"]
