"""
Policy document normalization.

IAM returns policy documents as URL-encoded JSON. Templates embed them as
JSON indented by two spaces, which lines up with YAML block indentation.
"""

import json
import re
from typing import Any, Mapping, Sequence, Union
from urllib.parse import unquote_plus

from ..exceptions import PolicyDecodeError

INDENT = 2

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

# YAML treats these as line breaks even inside a block scalar
_YAML_LINE_BREAKS = {ord(c): f"\\u{ord(c):04x}" for c in "\u0085\u2028\u2029"}

PolicyDocument = Union[str, Mapping[str, Any], Sequence[Any]]


def unquote_policy(encoded: str) -> str:
    """
    Strictly URL query-unescape a policy document.

    Args:
        encoded: URL-encoded text as returned by the IAM API

    Returns:
        The decoded text

    Raises:
        PolicyDecodeError: If an escape is malformed or the bytes are not UTF-8
    """
    match = _BAD_ESCAPE.search(encoded)
    if match:
        raise PolicyDecodeError(
            f"Invalid URL escape {encoded[match.start():match.start() + 3]!r} "
            f"at offset {match.start()}"
        )
    try:
        return unquote_plus(encoded, errors="strict")
    except UnicodeDecodeError as e:
        raise PolicyDecodeError(f"Policy document is not valid UTF-8: {e}") from e


def indent_policy_json(text: str) -> str:
    """Parse JSON text and re-serialize it with two-space indentation."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise PolicyDecodeError(f"Policy document is not valid JSON: {e}") from e
    return _dump(document)


def _dump(document: Any) -> str:
    try:
        text = json.dumps(document, indent=INDENT, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise PolicyDecodeError(f"Policy document cannot be serialized: {e}") from e
    return text.translate(_YAML_LINE_BREAKS)


def normalize_policy_document(document: PolicyDocument) -> str:
    """
    Decode a policy document and re-indent it with two spaces.

    botocore already decodes quoted policy documents into Python objects, so
    both the raw URL-encoded string and the decoded structure are accepted.

    Args:
        document: URL-encoded JSON string, or an already decoded document

    Returns:
        JSON text indented by two spaces per level

    Raises:
        PolicyDecodeError: If the document cannot be decoded or is not JSON
    """
    if isinstance(document, str):
        return indent_policy_json(unquote_policy(document))
    if isinstance(document, Mapping):
        return _dump(dict(document))
    if isinstance(document, (list, tuple)):
        return _dump(list(document))
    raise PolicyDecodeError(
        f"Unsupported policy document type: {type(document).__name__}"
    )
