"""In-process tag reader fed by tests, the CLI simulator or a ``SimulatedMachine``."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING

from liftlog.adapters.tag_payload import decode_text_record, encode_text_record
from liftlog.domain.tap_sessions import MalformedPayload, TagUnavailable

if TYPE_CHECKING:
    from liftlog.domain.ports import TagListener

    from .mock import SimulatedMachine

log = getLogger(__name__)


class SimulatedTagReader:
    """Hands out NDEF records in the order they were presented."""

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self._records: asyncio.Queue[bytes] = asyncio.Queue()
        self._listener: asyncio.Task[None] | None = None

    def present(self, record: bytes) -> None:
        """Put a tag with the given NDEF Text record payload in the field."""

        self._records.put_nowait(record)

    def present_payload(self, payload: Mapping[str, object] | str) -> None:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        self.present(encode_text_record(text))

    def present_machine(self, machine: SimulatedMachine) -> None:
        self.present(machine.tag_record())

    @property
    def pending(self) -> int:
        return self._records.qsize()

    @property
    def listening(self) -> bool:
        return self._listener is not None and not self._listener.done()

    async def read_once(self) -> bytes:
        self._ensure_enabled()
        record = await self._records.get()
        return decode_text_record(record).encode("utf-8")

    async def listen(self, on_tag: TagListener) -> None:
        self._ensure_enabled()
        await self.stop()
        self._listener = asyncio.create_task(self._pump(on_tag), name="simulated-tag-reader")

    async def stop(self) -> None:
        listener, self._listener = self._listener, None
        if listener is None:
            return
        listener.cancel()
        await asyncio.gather(listener, return_exceptions=True)

    async def _pump(self, on_tag: TagListener) -> None:
        while True:
            try:
                raw = await self.read_once()
            except MalformedPayload as exc:
                log.warning("Skipping unreadable tag: %s", exc)
                continue
            await on_tag(raw)

    def _ensure_enabled(self) -> None:
        if not self.enabled:
            raise TagUnavailable("NFC is disabled")
