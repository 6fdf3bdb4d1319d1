"""Embedded frames reachable through an HTTP control endpoint."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

import niquests

from showreel.core.config import get_settings
from showreel.media.base import EmbeddedFrame

logger = logging.getLogger(__name__)


class HttpFrameChannel(EmbeddedFrame):
    """Deliver player commands to a frame by POSTing them to its control URL.

    Commands are best effort: there are no retries. Inside a running event
    loop a command is handed to a single worker thread and ``post_message``
    returns at once, so a slow frame never holds up the loop; commands still
    go out in the order they were posted and their failures are logged and
    dropped. Without a running loop the command is sent inline and failures
    are raised to the handle, which drops them.
    """

    def __init__(self, control_url: str, timeout: float | None = None):
        settings = get_settings()
        self.control_url = control_url
        self.timeout = timeout if timeout is not None else settings.frame_command_timeout
        self.session = niquests.Session(retries=0)
        self.executor: ThreadPoolExecutor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="FrameCommand"
        )
        self._pending: set[asyncio.Future] = set()

    def post_message(self, message: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._post(message)
            return

        future = loop.run_in_executor(self.executor, self._post, message)
        self._pending.add(future)
        future.add_done_callback(self._finished)

    def _post(self, message: str) -> None:
        response = self.session.post(
            self.control_url,
            data=message,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        response.raise_for_status()

    def _finished(self, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if not future.cancelled() and future.exception() is not None:
            logger.debug("Frame command to %s failed: %s", self.control_url, future.exception())

    async def drain(self) -> None:
        """Wait for every command already handed to the worker."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def close(self) -> None:
        """Stop the command worker and close the internal HTTP session."""
        self.executor.shutdown(wait=False, cancel_futures=True)
        if self.session:
            self.session.close()

    def __repr__(self) -> str:
        return f"HttpFrameChannel({self.control_url!r})"
