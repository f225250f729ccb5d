"""Export functionality for research results."""

from .json_export import export_to_json, serialize_result
from .markdown import export_to_markdown

__all__ = [
    "export_to_markdown",
    "export_to_json",
    "serialize_result",
]
