from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class DataStore(Protocol):
    """Host persistence for one opaque record: load one blob, save one blob."""

    async def load_data(self) -> Optional[dict[str, Any]]:
        ...

    async def save_data(self, record: Mapping[str, Any]) -> None:
        ...
