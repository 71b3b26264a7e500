"""
Cooperative cancellation.

A CancellationToken is shared between the caller and every layer of a
generation request. Layers poll it at their checkpoints; nothing is
preempted mid network call.
"""

import asyncio
import logging

from shorts_factory.errors import GenerationCancelled

logger = logging.getLogger(__name__)


class CancellationToken:
    """Out-of-band cancellation flag for one generation request.

    Example:
        >>> token = CancellationToken()
        >>> token.cancel()
        >>> token.raise_if_cancelled()
        Traceback (most recent call last):
        ...
        GenerationCancelled: Cancelled by user
    """

    def __init__(self):
        self._cancelled = False
        self._event = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Signal cancellation. Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._event is not None:
            self._event.set()
        logger.debug("Cancellation requested")

    def raise_if_cancelled(self) -> None:
        """Raise GenerationCancelled if the token has been cancelled."""
        if self._cancelled:
            raise GenerationCancelled()

    async def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds``, returning early if cancelled.

        Does not raise; callers check the token at their next checkpoint.
        """
        if self._cancelled or seconds <= 0:
            return
        if self._event is None:
            self._event = asyncio.Event()
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass


def check_cancelled(token) -> None:
    """Checkpoint helper accepting an optional token."""
    if token is not None:
        token.raise_if_cancelled()
