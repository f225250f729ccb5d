"""
Data model for research runs.

Everything handed out of a run is immutable: plans, notes, area results,
progress snapshots and the final result are frozen dataclasses holding
tuples. Only the Orchestrator accumulates mutable state while a run is live.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResearchStatus(str, Enum):
    """Stages of the research state machine."""

    IDLE = "idle"
    PLANNING = "planning"
    SEARCHING = "searching"
    ANALYZING = "analyzing"
    COMPILING = "compiling"
    FINALIZING = "finalizing"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (ResearchStatus.COMPLETE, ResearchStatus.ERROR)


class ResearchDepth(str, Enum):
    """How hard each question is searched."""

    STANDARD = "standard"
    COMPREHENSIVE = "comprehensive"
    EXHAUSTIVE = "exhaustive"

    def search_params(self) -> tuple[int, str]:
        """Return (max_results, search_depth) for the search service."""
        return _DEPTH_SEARCH_PARAMS[self]


_DEPTH_SEARCH_PARAMS: dict[ResearchDepth, tuple[int, str]] = {
    ResearchDepth.STANDARD: (5, "basic"),
    ResearchDepth.COMPREHENSIVE: (8, "advanced"),
    ResearchDepth.EXHAUSTIVE: (12, "advanced"),
}


@dataclass(frozen=True)
class ResearchOptions:
    """Per-run options."""

    depth: ResearchDepth = ResearchDepth.STANDARD
    max_sources: int = 10

    def __post_init__(self) -> None:
        if self.max_sources < 0:
            raise ValueError("max_sources must be >= 0")
        if not isinstance(self.depth, ResearchDepth):
            object.__setattr__(self, "depth", ResearchDepth(self.depth))


@dataclass(frozen=True)
class ResearchArea:
    """One thematic subdivision of the plan."""

    name: str
    questions: tuple[str, ...]


@dataclass(frozen=True)
class ResearchPlan:
    """Ordered research areas, produced once per run."""

    areas: tuple[ResearchArea, ...]

    @property
    def is_valid(self) -> bool:
        """At least one area, and every area has at least one question."""
        return bool(self.areas) and all(area.questions for area in self.areas)

    @property
    def question_count(self) -> int:
        return sum(len(area.questions) for area in self.areas)

    def to_list(self) -> list[dict[str, Any]]:
        return [{"area": a.name, "questions": list(a.questions)} for a in self.areas]

    @classmethod
    def default(cls) -> ResearchPlan:
        """Fixed fallback plan used when the model's plan cannot be parsed."""
        return cls(
            areas=(
                ResearchArea(
                    name="Main Research",
                    questions=(
                        "What are the key aspects of this topic?",
                        "What are the recent developments?",
                    ),
                ),
                ResearchArea(
                    name="Detailed Analysis",
                    questions=(
                        "What are the different perspectives on this topic?",
                        "What are the implications?",
                    ),
                ),
            )
        )


@dataclass(frozen=True)
class Source:
    """A single search-result citation gathered during research."""

    title: str
    url: str
    snippet: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url, "snippet": self.snippet}


@dataclass(frozen=True)
class ResearchNote:
    """The synthesized answer (or error placeholder) for one question."""

    question: str
    analysis: str
    source_urls: frozenset[str] = field(default_factory=frozenset)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "question": self.question,
            "analysis": self.analysis,
            "sources": sorted(self.source_urls),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class AreaResult:
    """All notes gathered for one plan area, in question order."""

    area: str
    notes: tuple[ResearchNote, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"area": self.area, "notes": [n.to_dict() for n in self.notes]}


@dataclass(frozen=True)
class ResearchProgress:
    """Point-in-time view of a run for progress callbacks."""

    status: ResearchStatus
    percent: int
    current_step: str
    source_count: int


@dataclass(frozen=True)
class ResearchResult:
    """Final output of a successful run."""

    query: str
    report: str
    sources: tuple[Source, ...]
    plan: ResearchPlan
    notes: tuple[AreaResult, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "report": self.report,
            "sources": [s.to_dict() for s in self.sources],
            "plan": self.plan.to_list(),
            "notes": [a.to_dict() for a in self.notes],
        }
