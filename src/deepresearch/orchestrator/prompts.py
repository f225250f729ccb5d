"""
Prompt builders for the three language-model steps of a run:
planning, per-question synthesis, and report compilation.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from ..providers.protocol import SearchHit
    from .models import AreaResult, ResearchPlan


def build_plan_prompt(query: str) -> str:
    """Ask for 3-5 research areas as a JSON array."""
    return (
        f'I need to conduct deep research on the following topic: "{query}".\n\n'
        "Please create a detailed research plan with 3-5 main areas to investigate. "
        "For each area, suggest specific questions to answer or aspects to explore.\n\n"
        "Format the response as a JSON array of objects with an 'area' string and a "
        "'questions' array of strings, inside a ```json fenced code block. Example:\n\n"
        "```json\n"
        '[{"area": "Background", "questions": ["What is ...?", "How did ...?"]}]\n'
        "```"
    )


def format_search_hits(hits: Sequence[SearchHit]) -> str:
    """Render raw search hits as numbered citations."""
    if not hits:
        return "(no search results)"

    blocks = []
    for i, hit in enumerate(hits, 1):
        blocks.append(f'[{i}] "{hit.title}"\nURL: {hit.url}\n{hit.content}\n')
    return "\n".join(blocks)


def build_analysis_prompt(query: str, question: str, hits: Sequence[SearchHit]) -> str:
    """Ask for a concise multi-paragraph analysis of one question's search hits."""
    return (
        f'Based on the following search results for the question "{question}" '
        f'related to "{query}", provide a concise but detailed analysis '
        "(about 2 paragraphs) that synthesizes the key information. "
        "Focus on factual information, different perspectives, and noteworthy insights. "
        "Cite results by their number, e.g. [2].\n\n"
        f"Search Results:\n{format_search_hits(hits)}"
    )


def build_report_prompt(
    query: str,
    plan: ResearchPlan,
    area_results: Sequence[AreaResult],
) -> str:
    """Ask for the final structured markdown report."""
    area_names = ", ".join(a.name for a in plan.areas)
    notes = [a.to_dict() for a in area_results]

    return (
        f'I\'ve conducted deep research on "{query}" and gathered the following notes. '
        "Please compile a comprehensive, well-structured research report that "
        "synthesizes all this information.\n\n"
        "The report must contain, in order:\n"
        "1. ## Executive Summary\n"
        "2. ## Introduction\n"
        f"3. One ## section per research area ({area_names})\n"
        "4. ## Conclusion\n"
        "5. ## Further Research\n\n"
        "Use markdown headings for structure. Where a note says research could not "
        "be completed, acknowledge the gap instead of inventing content.\n\n"
        f"Research Plan:\n{json.dumps(plan.to_list(), indent=2)}\n\n"
        f"Research Notes:\n{json.dumps(notes, indent=2)}"
    )
