from __future__ import annotations

from copy import deepcopy
from typing import Any, Mapping, Optional


class MemoryDataStore:
    """In-memory blob holder; callers never share references with the stored copy."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._record: Optional[dict[str, Any]] = deepcopy(dict(initial)) if initial is not None else None
        self.save_count = 0

    async def load_data(self) -> Optional[dict[str, Any]]:
        return deepcopy(self._record)

    async def save_data(self, record: Mapping[str, Any]) -> None:
        self._record = deepcopy(dict(record))
        self.save_count += 1
