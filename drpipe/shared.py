"""Awaitables that many awaiters can share while the wrapped work runs once."""

from __future__ import annotations

import asyncio
import enum
import weakref
from typing import Any, Awaitable, Generator, Generic, Optional, TypeVar

__all__ = ["PoisonedError", "SharedBox", "WeakShared", "boxed_shared"]

T = TypeVar("T")


class PoisonedError(RuntimeError):
    """Raised when the shared work failed or was cancelled while running."""


class _State(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    POISONED = "poisoned"


class _Inner:
    """State shared by every handle to the same piece of work."""

    __slots__ = ("awaitable", "task", "state", "output", "error", "__weakref__")

    def __init__(self, awaitable: Awaitable[Any]) -> None:
        self.awaitable: Optional[Awaitable[Any]] = awaitable
        self.task: Optional[asyncio.Future[Any]] = None
        self.state = _State.IDLE
        self.output: Any = None
        self.error: Optional[BaseException] = None

    def start(self) -> asyncio.Future[Any]:
        if self.task is None:
            self.task = asyncio.ensure_future(self.awaitable)
            self.awaitable = None
            self.state = _State.RUNNING
            self.task.add_done_callback(self.settle)
        return self.task

    def settle(self, task: asyncio.Future[Any]) -> None:
        if self.state is not _State.RUNNING or not task.done():
            return
        if task.cancelled():
            self.error = asyncio.CancelledError()
            self.state = _State.POISONED
            return
        error = task.exception()
        if error is not None:
            self.error = error
            self.state = _State.POISONED
            return
        self.output = task.result()
        self.state = _State.COMPLETE

    def check(self) -> None:
        if self.state is _State.POISONED:
            raise PoisonedError("inner future panicked during poll") from self.error


class SharedBox(Generic[T]):
    """A handle to work that runs once and whose result every clone receives.

    Each handle may be awaited once; awaiting it again raises ``RuntimeError``.
    Cancelling one awaiter leaves the shared work running for the others.
    """

    __slots__ = ("_inner",)

    def __init__(self, awaitable: Awaitable[T]) -> None:
        self._inner: Optional[_Inner] = _Inner(awaitable)

    @classmethod
    def _from_inner(cls, inner: Optional[_Inner]) -> "SharedBox[T]":
        box = cls.__new__(cls)
        box._inner = inner
        return box

    def __await__(self) -> Generator[Any, None, T]:
        return self._resolve().__await__()

    async def _resolve(self) -> T:
        inner = self._inner
        if inner is None:
            raise RuntimeError("Shared future polled again after completion")
        if inner.state is not _State.COMPLETE:
            inner.check()
            task = inner.start()
            await asyncio.wait((task,))
            inner.settle(task)
            if inner.state is _State.POISONED:
                self._inner = None
                inner.check()
        self._inner = None
        return inner.output

    def clone(self) -> "SharedBox[T]":
        """Return a new handle to the same work."""
        return self._from_inner(self._inner)

    __copy__ = clone

    def peek(self) -> Optional[T]:
        """Return the result if another handle has already produced it, else None."""
        inner = self._inner
        if inner is None:
            return None
        if inner.state is _State.COMPLETE:
            return inner.output
        inner.check()
        return None

    def downgrade(self) -> Optional["WeakShared[T]"]:
        """Return a weak handle, or None once this handle has finished."""
        if self._inner is None:
            return None
        return WeakShared(weakref.ref(self._inner))

    def ptr_eq(self, other: "SharedBox[Any]") -> bool:
        """True when both handles are live and refer to the same work."""
        if self._inner is None or other._inner is None:
            return False
        return self._inner is other._inner

    def ptr_hash(self) -> int:
        """A hash consistent with :meth:`ptr_eq`."""
        if self._inner is None:
            return hash((0,))
        return hash((1, id(self._inner)))

    def is_terminated(self) -> bool:
        """True once this handle has delivered its result."""
        return self._inner is None

    def __repr__(self) -> str:
        state = "terminated" if self._inner is None else self._inner.state.value
        return f"SharedBox({state})"


class WeakShared(Generic[T]):
    """A weak reference to shared work that can be turned back into a handle."""

    __slots__ = ("_ref",)

    def __init__(self, ref: "weakref.ReferenceType[_Inner]") -> None:
        self._ref = ref

    def upgrade(self) -> Optional[SharedBox[T]]:
        """Return a new handle, or None if every handle is gone or finished."""
        inner = self._ref()
        if inner is None:
            return None
        return SharedBox._from_inner(inner)

    def __repr__(self) -> str:
        return "WeakShared()"


def boxed_shared(awaitable: Awaitable[T]) -> SharedBox[T]:
    """Wrap an awaitable so that it can be awaited through many handles."""
    return SharedBox(awaitable)