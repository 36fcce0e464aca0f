"""
Transient toast notifications.
"""

import itertools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable


class ToastKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Toast:
    id: int
    message: str
    kind: ToastKind
    created_at: float
    auto_close_ms: int = field(default=1000)

    def expired(self, now: float) -> bool:
        return (now - self.created_at) * 1000 >= self.auto_close_ms


class ToastQueue:
    """Newest-first toasts, capped at ``limit``, each closing after ``auto_close_ms``."""

    def __init__(
        self,
        limit: int = 4,
        auto_close_ms: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.auto_close_ms = auto_close_ms
        self._clock = clock
        self._ids = itertools.count(1)
        self._toasts: list[Toast] = []

    def add(self, message: str, kind: ToastKind | str = ToastKind.INFO) -> Toast:
        toast = Toast(
            id=next(self._ids),
            message=message,
            kind=ToastKind(kind),
            created_at=self._clock(),
            auto_close_ms=self.auto_close_ms,
        )
        self._toasts.insert(0, toast)
        del self._toasts[self.limit:]
        return toast

    def dismiss(self, toast_id: int) -> None:
        self._toasts = [toast for toast in self._toasts if toast.id != toast_id]

    def active(self) -> list[Toast]:
        now = self._clock()
        self._toasts = [toast for toast in self._toasts if not toast.expired(now)]
        return list(self._toasts)

    def as_list(self) -> list[dict]:
        return [
            {"id": toast.id, "message": toast.message, "kind": toast.kind.value}
            for toast in self.active()
        ]
