"""Buffered writer that streams response bytes to the client through a bounded queue."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Union

log = logging.getLogger(__name__)


class ResponseWriter:
    """Collect response bytes in memory and hand them to the client queue on flush.

    The queue is bounded, which gives back-pressure: ``async_flush`` waits for
    the client to consume data, while ``flush`` fails at once when the queue is
    full. Set ``client_closed`` once the client has gone away. Used as a
    context manager, the writer flushes what is left on exit.
    """

    def __init__(self, queue: "asyncio.Queue[bytes]") -> None:
        self.queue = queue
        self.client_closed = False
        self._buffer = bytearray()

    def __enter__(self) -> "ResponseWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        try:
            self.flush()
        except OSError as exc:
            log.debug("Could not flush data to client: %s", exc)

    def write(self, data: Union[bytes, bytearray, str]) -> int:
        """Append data to the buffer and return how many bytes were taken."""
        chunk = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        self._buffer.extend(chunk)
        return len(chunk)

    def _take(self) -> bytes:
        data = bytes(self._buffer)
        self._buffer.clear()
        return data

    def flush(self) -> None:
        """Send the buffer without waiting; raise BlockingIOError if it cannot be queued."""
        if not self._buffer:
            return
        data = self._take()
        log.debug("Flushing data to client: %s", data.decode("utf-8", "replace"))
        reason: Optional[str] = None
        if self.client_closed:
            reason = "channel closed"
        else:
            try:
                self.queue.put_nowait(data)
            except asyncio.QueueFull:
                reason = "no available capacity"
        if reason is not None:
            raise BlockingIOError(
                f"{reason}: Row limit exceeded. The server cannot store more than "
                f"{self.queue.maxsize} pending messages in memory. Try again later "
                "or increase max_pending_rows in the configuration."
            )

    async def async_flush(self) -> None:
        """Send the buffer, waiting for room in the queue if needed."""
        if not self._buffer:
            return
        log.debug(
            "Flushing data to client: %s", self._buffer.decode("utf-8", "replace")
        )
        if self.client_closed:
            raise BlockingIOError("The client has closed the connection")
        await self.queue.put(self._take())

    async def close_with_error(self, msg: str) -> None:
        """Flush what is buffered, then send ``msg`` as the last piece of the response."""
        if self.client_closed:
            log.error("Unable to send error back to client: the connection is closed")
            return
        try:
            await self.async_flush()
        except OSError as exc:
            msg += f"Unable to flush data: {exc}"
        await self.queue.put(msg.encode("utf-8"))