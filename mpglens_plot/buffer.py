from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from typing import Literal

import numpy as np

from mpglens_plot.records import TrendRecord


LOGGER = logging.getLogger(__name__)

ChangeKind = Literal["redraw", "clear"]


@dataclass(frozen=True)
class BufferChange:
    kind: ChangeKind
    length: int
    revision: int


BufferListener = Callable[[BufferChange], None]


class TrendBuffer:
    """Append-only, arrival-ordered prediction history.

    Each ``append`` emits one ``redraw`` change and each ``reset`` emits one
    ``clear`` change, including a reset of an already empty buffer.
    """

    def __init__(self) -> None:
        self._records: list[TrendRecord] = []
        self._listeners: list[BufferListener] = []
        self._revision = 0

    def __len__(self) -> int:
        return len(self._records)

    @property
    def revision(self) -> int:
        return self._revision

    def records(self) -> tuple[TrendRecord, ...]:
        return tuple(self._records)

    def values(self) -> np.ndarray:
        return np.asarray([r.value for r in self._records], dtype=np.float64)

    def append(self, record: TrendRecord) -> BufferChange:
        self._records.append(record)
        return self._emit("redraw")

    def reset(self) -> BufferChange:
        self._records.clear()
        return self._emit("clear")

    def subscribe(self, listener: BufferListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, kind: ChangeKind) -> BufferChange:
        self._revision += 1
        change = BufferChange(kind=kind, length=len(self._records), revision=self._revision)
        LOGGER.debug("trend buffer %s (length=%d)", kind, change.length)
        for listener in tuple(self._listeners):
            listener(change)
        return change
