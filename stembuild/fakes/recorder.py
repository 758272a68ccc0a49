"""Recording test doubles: captured calls and canned results."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class _Outcome:
    value: Any = None
    error: BaseException | None = None

    def resolve(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


def _pack(values: tuple) -> Any:
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


def _snapshot(value: Any) -> Any:
    if isinstance(value, list):
        return list(value)
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, set):
        return set(value)
    return value


class Fake:
    """Base for fakes; keeps every call made on its fake methods."""

    def __init__(self) -> None:
        self._invocations: dict[str, list[tuple]] = {}
        self._invocations_lock = threading.Lock()

    def invocations(self) -> dict[str, list[tuple]]:
        """A copy of the recorded calls, keyed by method name."""
        with self._invocations_lock:
            return {name: list(calls) for name, calls in self._invocations.items()}

    def _record(self, name: str, args: tuple) -> None:
        with self._invocations_lock:
            self._invocations.setdefault(name, []).append(args)


class FakeMethod:
    """A callable that records its arguments and returns configured results."""

    def __init__(self, name: str, recorder: Fake) -> None:
        self.name = name
        self._recorder = recorder
        self._lock = threading.Lock()
        self._calls: list[tuple] = []
        self._stub: Callable[..., Any] | None = None
        self._default = _Outcome()
        self._on_call: dict[int, _Outcome] = {}

    def __call__(self, *args: Any) -> Any:
        recorded = tuple(_snapshot(arg) for arg in args)
        with self._lock:
            outcome = self._on_call.get(len(self._calls))
            self._calls.append(recorded)
            stub = self._stub
            default = self._default
        self._recorder._record(self.name, recorded)
        if stub is not None:
            return stub(*args)
        return (outcome if outcome is not None else default).resolve()

    def returns(self, *args: Any) -> None:
        """Return these values from every call (a tuple when more than one)."""
        with self._lock:
            self._stub = None
            self._default = _Outcome(value=_pack(args))

    def returns_on_call(self, index: int, *args: Any) -> None:
        """Return these values from the call with this zero-based index."""
        with self._lock:
            self._stub = None
            self._on_call[index] = _Outcome(value=_pack(args))

    def raises(self, error: BaseException) -> None:
        """Raise this error from every call."""
        with self._lock:
            self._stub = None
            self._default = _Outcome(error=error)

    def raises_on_call(self, index: int, error: BaseException) -> None:
        """Raise this error from the call with this zero-based index."""
        with self._lock:
            self._stub = None
            self._on_call[index] = _Outcome(error=error)

    def calls(self, stub: Callable[..., Any]) -> None:
        """Delegate every call to ``stub``."""
        with self._lock:
            self._stub = stub

    def call_count(self) -> int:
        with self._lock:
            return len(self._calls)

    def args_for_call(self, index: int) -> Any:
        """Arguments of a call; a single argument is returned alone."""
        with self._lock:
            args = self._calls[index]
        return args[0] if len(args) == 1 else args