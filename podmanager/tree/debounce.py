"""Таймер с отложенным запуском: серия вызовов схлопывается в один."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

LOGGER = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Контракт таймера, совместимый с ``threading.Timer``."""

    daemon: bool

    def start(self) -> None:  # pragma: no cover - протокол
        """Запускает отсчёт."""

    def cancel(self) -> None:  # pragma: no cover - протокол
        """Отменяет отложенный вызов."""


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


class Debouncer:
    """Хранит один отложенный таймер; каждый ``trigger`` переносит срабатывание."""

    def __init__(
        self,
        delay_ms: int,
        callback: Callable[[], None],
        *,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._delay = max(delay_ms, 0) / 1000.0
        self._callback = callback
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending: Optional[TimerHandle] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def trigger(self) -> None:
        """Отменяет ожидающий вызов и планирует новый."""

        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(self._delay, lambda: self._fire(generation))
            timer.daemon = True
            self._pending = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None

    def flush(self) -> None:
        """Немедленно выполняет ожидающий вызов, если он есть."""

        with self._lock:
            if self._pending is None:
                return
            self._pending.cancel()
            generation = self._generation
        self._fire(generation)

    def _fire(self, generation: int) -> None:
        with self._lock:
            # отменённый таймер мог успеть сработать
            if generation != self._generation or self._pending is None:
                return
            self._pending = None
        try:
            self._callback()
        except Exception as exc:  # pragma: no cover - callback не должен ронять поток таймера
            LOGGER.error("Debounced callback failed: %s", exc, exc_info=True)
