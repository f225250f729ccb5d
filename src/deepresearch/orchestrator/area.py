"""
Per-area research: one search and one synthesis per question, strictly in order.

A failure while researching one question becomes an error note for that
question and the loop moves on. Cancellation is never swallowed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..providers.protocol import ChatMessage
from .errors import CancellationError, QuestionResearchError
from .models import ResearchArea, ResearchDepth, ResearchNote, Source
from .prompts import build_analysis_prompt

if TYPE_CHECKING:
    from ..providers.protocol import CompletionService, SearchHit, SearchService
    from .cancellation import CancellationToken

logger = logging.getLogger(__name__)

SNIPPET_CHARS = 150

StepCallback = Callable[[str], None]
SourcesCallback = Callable[[list[Source]], None]


def make_source(hit: SearchHit) -> Source:
    """Convert a raw search hit into a citation with a short snippet."""
    content = hit.content or ""
    snippet = content[:SNIPPET_CHARS] + "..." if len(content) > SNIPPET_CHARS else content
    return Source(title=hit.title or "", url=hit.url or "", snippet=snippet)


def failed_note(question: str, reason: str) -> ResearchNote:
    """Error-flavored note standing in for a question that could not be researched."""
    return ResearchNote(
        question=question,
        analysis=f"Unable to complete research for this question due to an error: {reason}",
        source_urls=frozenset(),
        error=reason,
    )


class AreaResearcher:
    """Researches the questions of one plan area."""

    def __init__(
        self,
        completion: CompletionService,
        search: SearchService,
        query: str,
        depth: ResearchDepth = ResearchDepth.STANDARD,
    ) -> None:
        self.completion = completion
        self.search = search
        self.query = query
        self.depth = depth

    async def research(
        self,
        area: ResearchArea,
        token: CancellationToken,
        on_step: StepCallback | None = None,
        on_sources: SourcesCallback | None = None,
    ) -> list[ResearchNote]:
        """
        Research every question of an area in order.

        Args:
            area: Plan area to research
            token: Cancellation token checked before each question
            on_step: Called with a step description before each question
            on_sources: Called with the sources found for each question

        Returns:
            One note per question, in question order

        Raises:
            CancellationError: If the token is cancelled between steps
        """
        notes: list[ResearchNote] = []

        for question in area.questions:
            token.raise_if_cancelled()

            if on_step is not None:
                on_step(f"Researching: {question}")

            try:
                note = await self._research_question(question, token, on_sources)
            except CancellationError:
                raise
            except Exception as e:
                error = QuestionResearchError(question, str(e) or type(e).__name__)
                logger.warning(f"[{area.name}] {error}")
                note = failed_note(question, error.reason)

            notes.append(note)

        return notes

    async def _research_question(
        self,
        question: str,
        token: CancellationToken,
        on_sources: SourcesCallback | None,
    ) -> ResearchNote:
        max_results, search_depth = self.depth.search_params()
        search_query = f"{self.query} {question}"

        response = await self.search.search(search_query, max_results, search_depth)
        hits = list(response.results)

        sources = [make_source(hit) for hit in hits]
        if on_sources is not None and sources:
            on_sources(sources)

        # The search has finished; don't start the synthesis call if cancelled meanwhile
        token.raise_if_cancelled()

        prompt = build_analysis_prompt(self.query, question, hits)
        analysis = await self.completion.complete([ChatMessage(role="user", content=prompt)])

        logger.debug(f"Analyzed '{question[:60]}' from {len(hits)} results")

        return ResearchNote(
            question=question,
            analysis=analysis,
            source_urls=frozenset(s.url for s in sources if s.url),
        )
