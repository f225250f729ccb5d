"""
deepresearch - Multi-stage deep research pipeline.

Turns one query into a structured research report: a language model drafts a
research plan, every plan question is searched and analyzed in turn, and the
notes are compiled into a final markdown report. Progress is reported live,
runs can be cancelled cooperatively, and failed questions or areas degrade
the report instead of aborting the run.

Example:
    import asyncio
    from deepresearch import Orchestrator, ResearchDepth, ResearchOptions
    from deepresearch.providers.completion import AnthropicCompletion
    from deepresearch.providers.search import SearchManager, TavilySearchProvider

    async def main():
        orchestrator = Orchestrator(
            completion=AnthropicCompletion(api_key="..."),
            search=SearchManager([TavilySearchProvider(api_key="...")]),
            on_progress=lambda p: print(f"{p.percent:3d}% {p.current_step}"),
        )
        result = await orchestrator.run(
            "State of solid-state batteries",
            ResearchOptions(depth=ResearchDepth.COMPREHENSIVE, max_sources=15),
        )
        print(result.report)

    asyncio.run(main())
"""

__version__ = "0.1.0"

from .orchestrator import (
    Orchestrator,
    ResearchDepth,
    ResearchError,
    ResearchOptions,
    ResearchProgress,
    ResearchResult,
    ResearchRun,
    ResearchStatus,
)
from .providers.protocol import ChatMessage, CompletionService, SearchService

__all__ = [
    "__version__",
    "ChatMessage",
    "CompletionService",
    "Orchestrator",
    "ResearchDepth",
    "ResearchError",
    "ResearchOptions",
    "ResearchProgress",
    "ResearchResult",
    "ResearchRun",
    "ResearchStatus",
    "SearchService",
]
