"""Replay tag payloads recorded one JSON document per line."""

from __future__ import annotations

import asyncio
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from liftlog.domain.tap_sessions import TagUnavailable

if TYPE_CHECKING:
    from collections.abc import Iterator

    from liftlog.domain.ports import TagListener

log = getLogger(__name__)


def iter_payload_lines(text: str) -> Iterator[str]:
    """Yield payload lines, skipping blanks and ``#`` comments."""

    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            yield stripped


class JsonLinesTagReader:
    def __init__(self, path: Path | str, *, interval_s: float = 0.0) -> None:
        self.path = Path(path)
        self.interval_s = interval_s
        self._lines: list[str] | None = None
        self._position = 0
        self._listener: asyncio.Task[None] | None = None

    @property
    def remaining(self) -> int:
        return len(self._load()) - self._position

    async def read_once(self) -> bytes:
        lines = self._load()
        if self._position >= len(lines):
            raise TagUnavailable(f"No more recorded tags in {self.path}")
        line = lines[self._position]
        self._position += 1
        return line.encode("utf-8")

    async def listen(self, on_tag: TagListener) -> None:
        self._load()
        await self.stop()
        self._listener = asyncio.create_task(self._replay(on_tag), name="jsonl-tag-reader")

    async def wait_closed(self) -> None:
        """Wait until every recorded tag has been delivered."""

        if self._listener is not None:
            await self._listener

    async def stop(self) -> None:
        listener, self._listener = self._listener, None
        if listener is None or listener.done():
            return
        listener.cancel()
        await asyncio.gather(listener, return_exceptions=True)

    async def _replay(self, on_tag: TagListener) -> None:
        while self.remaining:
            await on_tag(await self.read_once())
            if self.interval_s:
                await asyncio.sleep(self.interval_s)
        log.info("Replayed all tags from %s", self.path)

    def _load(self) -> list[str]:
        if self._lines is None:
            try:
                text = self.path.read_text(encoding="utf-8")
            except OSError as exc:
                raise TagUnavailable(f"Cannot read recorded tags from {self.path}") from exc
            self._lines = list(iter_payload_lines(text))
            log.debug("Loaded %d recorded tags from %s", len(self._lines), self.path)
        return self._lines
