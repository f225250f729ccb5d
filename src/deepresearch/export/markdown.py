"""
Markdown export for research results.

Produces a standalone document with:
- Frontmatter metadata
- The compiled report
- Numbered source list
- Per-area research notes appendix
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..orchestrator.models import AreaResult, ResearchResult, Source


def _format_source(source: "Source", index: int) -> str:
    title = source.title or "Untitled Source"
    line = f"{index}. [{title}]({source.url})" if source.url else f"{index}. {title}"
    if source.snippet:
        line += f"\n   > {source.snippet}"
    return line


def _format_area_notes(area_result: "AreaResult") -> str:
    lines = [f"### {area_result.area}\n"]
    for note in area_result.notes:
        marker = " (incomplete)" if note.failed else ""
        lines.append(f"**{note.question}**{marker}\n")
        lines.append(f"{note.analysis.strip()}\n")
        if note.source_urls:
            lines.append("Sources: " + ", ".join(sorted(note.source_urls)) + "\n")
    return "\n".join(lines)


def export_to_markdown(
    result: "ResearchResult",
    output_path: Path | None = None,
    include_notes: bool = True,
) -> str:
    """
    Render a research result as markdown.

    Args:
        result: Completed research result
        output_path: Optional file to write
        include_notes: Append the per-area research notes

    Returns:
        Markdown string
    """
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    note_count = sum(len(a.notes) for a in result.notes)
    query = result.query.replace('"', '\\"')

    parts = [
        "---\n"
        f'query: "{query}"\n'
        f"generated: {now}\n"
        f"areas: {len(result.plan.areas)}\n"
        f"notes: {note_count}\n"
        f"sources: {len(result.sources)}\n"
        "---\n",
        result.report.strip() + "\n",
    ]

    if result.sources:
        parts.append("## Sources\n")
        parts.append("\n".join(_format_source(s, i) for i, s in enumerate(result.sources, 1)) + "\n")

    if include_notes and result.notes:
        parts.append("## Appendix: Research Notes\n")
        parts.extend(_format_area_notes(a) for a in result.notes)

    markdown = "\n".join(parts)

    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(markdown, encoding="utf-8")

    return markdown
