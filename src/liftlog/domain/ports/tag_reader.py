"""Port abstracting the NFC transport (hardware or simulated)."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

type TagListener = Callable[[bytes], Awaitable[None]]


@runtime_checkable
class TagReader(Protocol):
    """Source of raw tag payload bytes.

    ``read_once`` and ``listen`` raise ``TagUnavailable`` when the transport is
    missing or disabled.
    """

    async def read_once(self) -> bytes: ...

    async def listen(self, on_tag: TagListener) -> None: ...

    async def stop(self) -> None: ...
