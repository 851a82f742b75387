from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from liftlog.adapters.tag_payload import encode_text_record
from liftlog.adapters.tag_readers import JsonLinesTagReader, SimulatedTagReader
from liftlog.domain.ports import TagReader
from liftlog.domain.tap_sessions import MalformedPayload, TagUnavailable

if TYPE_CHECKING:
    from pathlib import Path


def test_readers_satisfy_port(tmp_path: Path) -> None:
    async def scenario() -> None:
        assert isinstance(SimulatedTagReader(), TagReader)
        assert isinstance(JsonLinesTagReader(tmp_path / "tags.jsonl"), TagReader)

    asyncio.run(scenario())


def test_simulated_reader_returns_record_text() -> None:
    async def scenario() -> bytes:
        reader = SimulatedTagReader()
        reader.present_payload({"currentSessionId": "s1"})
        return await reader.read_once()

    assert asyncio.run(scenario()) == b'{"currentSessionId": "s1"}'


def test_simulated_reader_disabled_raises() -> None:
    async def scenario() -> None:
        reader = SimulatedTagReader(enabled=False)
        with pytest.raises(TagUnavailable):
            await reader.read_once()
        with pytest.raises(TagUnavailable):
            await reader.listen(_ignore)

    asyncio.run(scenario())


def test_simulated_reader_rejects_broken_record() -> None:
    async def scenario() -> None:
        reader = SimulatedTagReader()
        reader.present(b"\x09en")
        with pytest.raises(MalformedPayload):
            await reader.read_once()

    asyncio.run(scenario())


def test_simulated_listener_skips_unreadable_tags() -> None:
    received: list[bytes] = []

    async def on_tag(raw: bytes) -> None:
        received.append(raw)

    async def scenario() -> None:
        reader = SimulatedTagReader()
        await reader.listen(on_tag)
        reader.present(b"\x09en")
        reader.present(encode_text_record("second"))
        await asyncio.sleep(0.02)
        assert reader.listening
        await reader.stop()
        assert not reader.listening

    asyncio.run(scenario())

    assert received == [b"second"]


def test_jsonl_reader_replays_lines_in_order(tmp_path: Path) -> None:
    path = tmp_path / "tags.jsonl"
    path.write_text('# recorded at the gym\n{"a": 1}\n\n{"b": 2}\n', encoding="utf-8")
    received: list[bytes] = []

    async def on_tag(raw: bytes) -> None:
        received.append(raw)

    async def scenario() -> None:
        reader = JsonLinesTagReader(path)
        assert reader.remaining == 2
        await reader.listen(on_tag)
        await reader.wait_closed()
        with pytest.raises(TagUnavailable):
            await reader.read_once()

    asyncio.run(scenario())

    assert received == [b'{"a": 1}', b'{"b": 2}']


def test_jsonl_reader_missing_file(tmp_path: Path) -> None:
    async def scenario() -> None:
        reader = JsonLinesTagReader(tmp_path / "missing.jsonl")
        with pytest.raises(TagUnavailable):
            await reader.read_once()

    asyncio.run(scenario())


async def _ignore(_raw: bytes) -> None:
    return None
