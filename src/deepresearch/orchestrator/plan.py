"""
Research plan generation.

The completion service is asked for a JSON array of areas. Its reply is
parsed with three strategies, in order:

1. PARSED: a fenced ```json block holding a valid plan
2. RECOVERED: the first bracket-delimited array in the text holding a valid plan
3. DEFAULT: the fixed two-area plan

Parsing never raises; only a failing completion call does.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..providers.protocol import ChatMessage
from .errors import PlanGenerationError
from .models import ResearchArea, ResearchPlan
from .prompts import build_plan_prompt

if TYPE_CHECKING:
    from ..providers.protocol import CompletionService

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```[ \t]*(?:json|JSON)?[ \t]*\n?(.*?)```", re.DOTALL)
_NAME_KEYS = ("area", "name", "title")
_LIST_KEYS = ("areas", "plan", "research_plan")


class PlanOrigin(str, Enum):
    """Which parsing strategy produced a plan."""

    PARSED = "parsed"
    RECOVERED = "recovered"
    DEFAULT = "default"


@dataclass(frozen=True)
class PlanParseResult:
    """Tagged outcome of parsing a plan response."""

    plan: ResearchPlan
    origin: PlanOrigin


def _coerce_area(item: Any) -> ResearchArea | None:
    if not isinstance(item, dict):
        return None

    name = next(
        (item[k].strip() for k in _NAME_KEYS if isinstance(item.get(k), str) and item[k].strip()),
        None,
    )
    raw_questions = item.get("questions")
    if name is None or not isinstance(raw_questions, list):
        return None

    questions = tuple(q.strip() for q in raw_questions if isinstance(q, str) and q.strip())
    if not questions:
        return None

    return ResearchArea(name=name, questions=questions)


def plan_from_data(data: Any) -> ResearchPlan | None:
    """
    Build a plan from decoded JSON.

    Accepts a list of area objects, or an object wrapping that list under
    ``areas``/``plan``/``research_plan``. Malformed entries are dropped.

    Returns:
        A valid plan, or None if nothing usable remains
    """
    if isinstance(data, dict):
        data = next((data[k] for k in _LIST_KEYS if isinstance(data.get(k), list)), None)
    if not isinstance(data, list):
        return None

    areas = tuple(area for area in (_coerce_area(item) for item in data) if area is not None)
    plan = ResearchPlan(areas=areas)
    return plan if plan.is_valid else None


def _parse_fenced(text: str) -> ResearchPlan | None:
    for match in _FENCED_BLOCK.finditer(text):
        try:
            data = json.loads(match.group(1).strip())
        except json.JSONDecodeError:
            continue
        plan = plan_from_data(data)
        if plan is not None:
            return plan
    return None


def _parse_bracketed(text: str) -> ResearchPlan | None:
    decoder = json.JSONDecoder()
    start = text.find("[")
    while start != -1:
        try:
            data, _end = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, list):
            plan = plan_from_data(data)
            if plan is not None:
                return plan
        start = text.find("[", start + 1)
    return None


def parse_plan(text: str) -> PlanParseResult:
    """Parse a plan response, falling back to the default plan."""
    plan = _parse_fenced(text)
    if plan is not None:
        return PlanParseResult(plan=plan, origin=PlanOrigin.PARSED)

    plan = _parse_bracketed(text)
    if plan is not None:
        return PlanParseResult(plan=plan, origin=PlanOrigin.RECOVERED)

    return PlanParseResult(plan=ResearchPlan.default(), origin=PlanOrigin.DEFAULT)


class PlanGenerator:
    """Turns a query into a research plan via the completion service."""

    def __init__(self, completion: CompletionService) -> None:
        self.completion = completion

    async def generate_with_origin(self, query: str) -> PlanParseResult:
        """
        Generate a plan and report which parsing strategy produced it.

        Raises:
            PlanGenerationError: If the completion call fails
        """
        messages = [ChatMessage(role="user", content=build_plan_prompt(query))]
        try:
            response = await self.completion.complete(messages)
        except Exception as e:
            raise PlanGenerationError(f"Failed to generate research plan: {e}") from e

        result = parse_plan(response or "")
        if result.origin is PlanOrigin.DEFAULT:
            logger.warning("Could not parse research plan from model response; using default plan")
        else:
            logger.info(
                f"Research plan {result.origin.value}: {len(result.plan.areas)} areas, "
                f"{result.plan.question_count} questions"
            )
        return result

    async def generate(self, query: str) -> ResearchPlan:
        """Generate a research plan for a query."""
        return (await self.generate_with_origin(query)).plan
