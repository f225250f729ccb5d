"""Cooperative cancellation for research runs."""

from .errors import CancellationError


class CancellationToken:
    """
    Single cancel signal checked at every suspension point.

    Cancellation is cooperative: a collaborator call already in flight runs to
    completion and the next check after it raises CancellationError.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation. Idempotent; the first reason wins."""
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancellationError(self._reason or "Research was cancelled")
