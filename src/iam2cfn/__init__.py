"""
iam2cfn - Export IAM groups, managed policies and roles as CloudFormation templates.
"""

__version__ = "1.0.0"

from .config import ExportConfig, load_config
from .exceptions import (
    ConfigurationError,
    FetchError,
    Iam2CfnError,
    PolicyDecodeError,
    RenderError,
)

__all__ = [
    "ExportConfig",
    "load_config",
    "Iam2CfnError",
    "ConfigurationError",
    "FetchError",
    "PolicyDecodeError",
    "RenderError",
]
