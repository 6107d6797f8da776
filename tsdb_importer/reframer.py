"""Line reframer — rebuilds logical lines from bounded buffered reads.

A single read returns at most ``limit`` bytes, so a long physical line can
arrive as several fragments.  Each fragment is tagged as a prefix (more of
the same line follows) or terminal (the line ends here).
"""

from typing import BinaryIO, Iterable, Iterator

DEFAULT_READ_LIMIT = 4096


def iter_fragments(
    stream: BinaryIO, limit: int = DEFAULT_READ_LIMIT
) -> Iterator[tuple[bytes, bool]]:
    """Yield ``(fragment, is_prefix)`` pairs until end-of-stream.

    Terminal fragments have their ``\\n`` / ``\\r\\n`` terminator removed.
    A trailing line without a terminator is reported as terminal.
    Concatenating the fragments of one line gives the line's exact bytes.
    """
    # A "\r" ending a prefix is held back until we know whether "\n" follows
    carry = b""
    while True:
        read = stream.readline(limit)
        if not read:
            if carry:
                yield carry, False
            return

        chunk = carry + read
        carry = b""
        if chunk.endswith(b"\n"):
            chunk = chunk[:-1]
            if chunk.endswith(b"\r"):
                chunk = chunk[:-1]
            yield chunk, False
        elif len(read) < limit:
            # Short read without a terminator only happens at end-of-stream
            yield chunk, False
        else:
            if chunk.endswith(b"\r"):
                chunk, carry = chunk[:-1], b"\r"
            yield chunk, True


def iter_lines(fragments: Iterable[tuple[bytes, bool]]) -> Iterator[bytes]:
    """Assemble fragments into complete logical lines.

    Empty lines carry no record and are skipped.
    """
    pending: list[bytes] = []

    for fragment, is_prefix in fragments:
        pending.append(fragment)
        if is_prefix:
            continue

        line = b"".join(pending)
        pending = []
        if line:
            yield line

    if pending:
        line = b"".join(pending)
        if line:
            yield line


def read_lines(stream: BinaryIO, limit: int = DEFAULT_READ_LIMIT) -> Iterator[bytes]:
    """Lazily yield every logical line of *stream*."""
    return iter_lines(iter_fragments(stream, limit))
