"""
Exceptions raised while exporting IAM resources.

Lower layers raise these; only the CLI turns them into exit codes.
"""

from typing import Optional


class Iam2CfnError(Exception):
    """Base class for all export failures."""


class ConfigurationError(Iam2CfnError):
    """Raised when a configuration file cannot be loaded or is invalid."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(f"{message} ({details})" if details else message)


class FetchError(Iam2CfnError):
    """Raised when an IAM API call fails."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"IAM {operation} failed: {cause}")


class PolicyDecodeError(Iam2CfnError):
    """Raised when a policy document is not valid URL-encoded JSON."""


class RenderError(Iam2CfnError):
    """Raised when an inventory cannot be rendered into a template."""
