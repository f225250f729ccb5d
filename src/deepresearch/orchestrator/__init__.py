"""Deep research orchestrator: planning, per-area research and report compilation."""

from .area import AreaResearcher
from .cancellation import CancellationToken
from .core import Orchestrator, ResearchRun
from .errors import (
    AlreadyRunningError,
    AreaResearchError,
    CancellationError,
    CompilationError,
    NoDataError,
    PlanGenerationError,
    QuestionResearchError,
    ResearchError,
)
from .models import (
    AreaResult,
    ResearchArea,
    ResearchDepth,
    ResearchNote,
    ResearchOptions,
    ResearchPlan,
    ResearchProgress,
    ResearchResult,
    ResearchStatus,
    Source,
)
from .plan import PlanGenerator, PlanOrigin, PlanParseResult, parse_plan
from .progress import ProgressReporter
from .report import ReportCompiler

__all__ = [
    "AlreadyRunningError",
    "AreaResearchError",
    "AreaResearcher",
    "AreaResult",
    "CancellationError",
    "CancellationToken",
    "CompilationError",
    "NoDataError",
    "Orchestrator",
    "PlanGenerationError",
    "PlanGenerator",
    "PlanOrigin",
    "PlanParseResult",
    "ProgressReporter",
    "QuestionResearchError",
    "ReportCompiler",
    "ResearchArea",
    "ResearchDepth",
    "ResearchError",
    "ResearchNote",
    "ResearchOptions",
    "ResearchPlan",
    "ResearchProgress",
    "ResearchResult",
    "ResearchRun",
    "ResearchStatus",
    "Source",
    "parse_plan",
]
