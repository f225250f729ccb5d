"""Error taxonomy for research runs.

Question- and area-level errors are recovered inside the run and turned into
notes. Every other ResearchError ends the run in the ERROR state.
"""


class ResearchError(Exception):
    """Base class for all research run errors."""

    is_cancellation = False


class PlanGenerationError(ResearchError):
    """The completion service failed while generating the plan."""

    def __init__(self, message: str = "Failed to generate research plan"):
        super().__init__(message)


class QuestionResearchError(ResearchError):
    """Search or analysis failed for a single question (non-fatal)."""

    def __init__(self, question: str, reason: str):
        self.question = question
        self.reason = reason
        super().__init__(f"Research failed for question {question!r}: {reason}")


class AreaResearchError(ResearchError):
    """An entire area failed before producing any note (non-fatal)."""

    def __init__(self, area: str, reason: str):
        self.area = area
        self.reason = reason
        super().__init__(f"Research failed for area {area!r}: {reason}")


class NoDataError(ResearchError):
    """No research notes could be collected for the whole plan."""

    def __init__(self, message: str = "No research data could be collected"):
        super().__init__(message)


class CompilationError(ResearchError):
    """The completion service failed while compiling the final report."""

    def __init__(self, message: str = "Failed to compile research report"):
        super().__init__(message)


class CancellationError(ResearchError):
    """The run was cancelled by the caller."""

    is_cancellation = True

    def __init__(self, message: str = "Research was cancelled"):
        super().__init__(message)


class AlreadyRunningError(ResearchError):
    """start() was called while a run is active on the same orchestrator."""

    def __init__(self, query: str | None = None):
        self.query = query
        detail = f" (active query: {query!r})" if query else ""
        super().__init__(f"A research run is already active{detail}")
