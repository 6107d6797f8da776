"""Batch assembler — frames logical lines as JSON array payloads."""

from typing import Optional

OPEN_BRACKET = b"[\n"
SEPARATOR = b",\n"
CLOSE_BRACKET = b"\n]"


class BatchAssembler:
    """Groups the lines of one file into payloads of at most *batch_size* lines.

    Lines are written verbatim; each one is expected to already be a JSON
    object.  A payload looks like ``[\\n{...},\\n{...}\\n]``.
    """

    def __init__(self, batch_size: int):
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._batch_size = batch_size
        self._buffer = bytearray()
        self._line_count = 0

    @property
    def line_count(self) -> int:
        """1-based count of lines added so far for the current file."""
        return self._line_count

    def add(self, line: bytes) -> Optional[bytes]:
        """Append *line*; return the finished payload when it completes a batch."""
        self._line_count += 1
        position = self._line_count % self._batch_size

        if position == 1 or self._batch_size == 1:
            self._buffer += OPEN_BRACKET
        else:
            self._buffer += SEPARATOR
        self._buffer += line

        if position == 0:
            return self._close()
        return None

    def finish(self) -> Optional[bytes]:
        """Close and return the partial batch at end-of-stream, if any."""
        if self._line_count % self._batch_size == 0:
            return None
        return self._close()

    def _close(self) -> bytes:
        self._buffer += CLOSE_BRACKET
        payload = bytes(self._buffer)
        self._buffer.clear()
        return payload
