"""
Shared fake collaborators for research tests.

MockCompletion recognizes the three prompt kinds (plan, analysis, report) and
answers each with canned text. MockSearch returns deterministic hits with
unique urls. Both record every call and can be told to fail or to run a hook
(e.g. cancel the run) when a given call arrives.
"""

import re

import pytest

from deepresearch.providers.protocol import ProviderError, SearchHit, SearchResponse

PLAN_RESPONSE = """Here is the plan:

```json
[
  {"area": "Market", "questions": ["How big is the market?", "Who are the leaders?"]},
  {"area": "Technology", "questions": ["What is the core technology?", "What are the limits?"]}
]
```
"""

_QUESTION_IN_PROMPT = re.compile(r'for the question "(.*?)" related to', re.DOTALL)


def prompt_kind(prompt: str) -> str:
    if "create a detailed research plan" in prompt:
        return "plan"
    if "compile a comprehensive" in prompt:
        return "report"
    return "analysis"


class MockCompletion:
    """Completion collaborator with canned answers per prompt kind."""

    def __init__(
        self,
        plan_response: str = PLAN_RESPONSE,
        report_response: str = "# Executive Summary\n\nThe report.",
        fail_kinds: set[str] | None = None,
        fail_questions: set[str] | None = None,
        hook=None,
    ):
        self.plan_response = plan_response
        self.report_response = report_response
        self.fail_kinds = fail_kinds or set()
        self.fail_questions = fail_questions or set()
        self.hook = hook
        self.calls: list[tuple[str, str]] = []

    def kinds(self) -> list[str]:
        return [kind for kind, _ in self.calls]

    async def complete(self, messages):
        prompt = messages[-1].content
        kind = prompt_kind(prompt)
        self.calls.append((kind, prompt))

        if self.hook is not None:
            self.hook(kind, prompt)

        if kind in self.fail_kinds:
            raise ProviderError("mock", f"{kind} failed")

        if kind == "plan":
            return self.plan_response
        if kind == "report":
            return self.report_response

        match = _QUESTION_IN_PROMPT.search(prompt)
        question = match.group(1) if match else "?"
        if question in self.fail_questions:
            raise ProviderError("mock", f"analysis failed for {question}")
        return f"Analysis of {question}"


class MockSearch:
    """Search collaborator returning ``hits_per_call`` unique hits per query."""

    def __init__(self, hits_per_call: int = 2, fail_queries: set[str] | None = None, hook=None):
        self.hits_per_call = hits_per_call
        self.fail_queries = fail_queries or set()
        self.hook = hook
        self.calls: list[tuple[str, int, str]] = []

    @property
    def queries(self) -> list[str]:
        return [query for query, _, _ in self.calls]

    async def search(self, query, max_results, depth):
        self.calls.append((query, max_results, depth))
        call_number = len(self.calls)

        if self.hook is not None:
            self.hook(query)

        if any(fragment in query for fragment in self.fail_queries):
            raise ProviderError("mock-search", "search unavailable")

        return SearchResponse(
            query=query,
            results=[
                SearchHit(
                    title=f"Result {call_number}.{i}",
                    url=f"https://example.com/{call_number}/{i}",
                    content=f"Content for {query} number {i}",
                )
                for i in range(self.hits_per_call)
            ],
        )


@pytest.fixture
def completion():
    return MockCompletion()


@pytest.fixture
def search():
    return MockSearch()


@pytest.fixture
def make_completion():
    return MockCompletion


@pytest.fixture
def make_search():
    return MockSearch
