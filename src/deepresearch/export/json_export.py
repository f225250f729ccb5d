"""
JSON export for research results.

Produces machine-readable JSON with the report, plan, sources and notes.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..orchestrator.models import ResearchResult


def serialize_result(result: "ResearchResult") -> dict[str, Any]:
    """Serialize a result with export metadata."""
    return {
        "metadata": {
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "area_count": len(result.plan.areas),
            "note_count": sum(len(a.notes) for a in result.notes),
            "source_count": len(result.sources),
        },
        **result.to_dict(),
    }


def export_to_json(
    result: "ResearchResult",
    output_path: Path | None = None,
    pretty: bool = True,
) -> str:
    """
    Render a research result as JSON.

    Args:
        result: Completed research result
        output_path: Optional file to write
        pretty: Indent the output

    Returns:
        JSON string
    """
    text = json.dumps(
        serialize_result(result),
        indent=2 if pretty else None,
        ensure_ascii=False,
    )

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")

    return text
