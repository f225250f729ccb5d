"""
Final report compilation.

Sends the full plan and every collected note to the completion service in a
single prompt and returns the markdown report it writes.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Sequence

from ..providers.protocol import ChatMessage
from .errors import CompilationError
from .prompts import build_report_prompt

if TYPE_CHECKING:
    from ..providers.protocol import CompletionService
    from .models import AreaResult, ResearchPlan

logger = logging.getLogger(__name__)


class ReportCompiler:
    """Merges the plan and all area results into one report."""

    def __init__(self, completion: CompletionService) -> None:
        self.completion = completion

    async def compile(
        self,
        query: str,
        plan: ResearchPlan,
        area_results: Sequence[AreaResult],
    ) -> str:
        """
        Compile the final report.

        Raises:
            CompilationError: If the completion call fails or returns nothing
        """
        prompt = build_report_prompt(query, plan, area_results)
        start = time.monotonic()

        try:
            report = await self.completion.complete([ChatMessage(role="user", content=prompt)])
        except Exception as e:
            raise CompilationError(f"Failed to compile research report: {e}") from e

        if not report or not report.strip():
            raise CompilationError("Failed to compile research report: empty response")

        logger.info(
            f"Compiled report ({len(report):,} chars) in {time.monotonic() - start:.1f}s"
        )
        return report.strip()
