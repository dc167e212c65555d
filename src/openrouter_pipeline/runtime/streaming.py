"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Incremental decoder for server-sent-event completion streams.
"""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterator

from pydantic import ValidationError

from ..errors import OpenRouterError, error_for_status
from ..wire import StreamChunk

logger = logging.getLogger("openrouter_pipeline.streaming")

DONE_SENTINEL = "[DONE]"
_DATA_PREFIX = "data:"


class StreamDecoder:
    """
    Line-buffered SSE decoder yielding text deltas.

    Bytes may arrive split anywhere, including inside a multi-byte UTF-8
    sequence; only complete lines are parsed. Once `[DONE]` is seen the
    decoder is `done` and ignores any further input.

    An in-band error record stops decoding: text decoded ahead of it in the
    same read is still returned, and the classified error is kept in
    `error` for the caller to raise.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.done = False
        self.dropped = 0
        self.error: OpenRouterError | None = None

    def feed(self, data: bytes) -> list[str]:
        if self.done or self.error is not None:
            return []
        self._buffer += self._decoder.decode(data)
        *lines, self._buffer = self._buffer.split("\n")
        return self._consume(lines)

    def flush(self) -> list[str]:
        """Process a trailing unterminated line once the source is exhausted."""
        if self.done or self.error is not None:
            return []
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return self._consume([tail])

    def _consume(self, lines: list[str]) -> list[str]:
        out: list[str] = []
        for line in lines:
            try:
                text = self._parse_line(line.rstrip("\r"))
            except OpenRouterError as error:
                self.error = error
                break
            if self.done:
                break
            if text:
                out.append(text)
        return out

    def _parse_line(self, line: str) -> str | None:
        if not line.strip() or line.startswith(":"):
            return None
        body = line[len(_DATA_PREFIX):] if line.startswith(_DATA_PREFIX) else line
        body = body.strip()
        if body == DONE_SENTINEL:
            self.done = True
            return None

        try:
            chunk = StreamChunk.model_validate(json.loads(body))
        except (json.JSONDecodeError, ValidationError) as error:
            self.dropped += 1
            logger.warning("Dropping malformed stream record %r: %s", body[:200], error)
            return None

        if chunk.error is not None:
            code = chunk.error.code
            status = int(code) if isinstance(code, int) or (isinstance(code, str) and code.isdigit()) else None
            raise error_for_status(
                status,
                chunk.error.message,
                payload=chunk.model_dump(),
            )
        return chunk.text()


async def decode_sse_stream(chunks: AsyncIterator[bytes]) -> AsyncIterator[str]:
    """
    Lazily decode a byte stream into text deltas.

    The source iterator is closed on every exit path, including early
    consumer exit and cancellation.
    """
    decoder = StreamDecoder()
    try:
        async for data in chunks:
            for text in decoder.feed(data):
                yield text
            if decoder.error is not None:
                raise decoder.error
            if decoder.done:
                return
        for text in decoder.flush():
            yield text
        if decoder.error is not None:
            raise decoder.error
    finally:
        aclose = getattr(chunks, "aclose", None)
        if aclose is not None:
            await aclose()
