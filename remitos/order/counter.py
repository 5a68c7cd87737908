from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Optional, Protocol

from remitos.constants import COUNTER_KEY, COUNTER_START
from remitos.errors import CounterError

logger = logging.getLogger(__name__)


class CounterStore(Protocol):
    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, value: str) -> None: ...

    def swap(self, key: str, update: Callable[[Optional[str]], str]) -> Optional[str]: ...


class MemoryCounterStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value

    def swap(self, key: str, update: Callable[[Optional[str]], str]) -> Optional[str]:
        old = self.data.get(key)
        self.data[key] = update(old)
        return old


class Counter:
    """
    Remito number sequence.

    peek() shows the number the next remito will get, without consuming it.
    take_next() consumes it through store.swap(), which reads and persists +1 in one
    transaction, so two commits (or two processes) never get the same number.
    An unreadable stored value raises CounterError instead of restarting the sequence.
    """

    def __init__(self, store: CounterStore, key: str = COUNTER_KEY, start: int = COUNTER_START) -> None:
        self.store = store
        self.key = key
        self.start = start
        self._lock = threading.Lock()

    def _parse(self, raw: Optional[str]) -> int:
        if raw is None or str(raw).strip() == "":
            return self.start
        try:
            return int(str(raw).strip())
        except ValueError as e:
            logger.error("counter %s has unreadable value %r", self.key, raw)
            raise CounterError(f"counter {self.key} has unreadable value {raw!r}") from e

    def peek(self) -> int:
        return self._parse(self.store.read(self.key))

    def take_next(self) -> int:
        with self._lock:
            raw = self.store.swap(self.key, lambda old: str(self._parse(old) + 1))
        return self._parse(raw)
