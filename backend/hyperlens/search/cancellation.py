"""
PURPOSE: Cancellation token passed into a resolution so a newer search can
invalidate an older in-flight one.
"""

from hyperlens.exceptions import ResolutionCancelled


class CancellationToken:
    """
    PURPOSE: One-shot cancellation flag.

    Attributes:
        reason: Why the token was cancelled, if it was.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self.reason: str = ""

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str = "superseded") -> None:
        self._cancelled = True
        self.reason = reason

    def raise_if_cancelled(self) -> None:
        """
        Raises:
            ResolutionCancelled: If cancel() was called.
        """
        if self._cancelled:
            raise ResolutionCancelled(f"Resolution cancelled: {self.reason}")
