"""
AsyncData: the lifecycle of a value that is fetched in the background.

Exactly one of four states:
  NotAsked        nothing requested yet
  Loading(prev)   request in flight; `prev` is the last successful value, if any,
                  so a consumer can keep showing stale data while reloading
  Failure(error)  request finished with an error
  Success(data)   request finished with data

Values are immutable. Every transition builds a new AsyncData; nothing here
updates an existing value in place. Consumers either use the is_*/get_*
accessors or `fold`, which forces a handler for every state.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

E = TypeVar("E")
A = TypeVar("A")
B = TypeVar("B")
T = TypeVar("T")


class State(Enum):
    NOT_ASKED = "not_asked"
    LOADING = "loading"
    FAILURE = "failure"
    SUCCESS = "success"


@dataclass(frozen=True)
class AsyncData(Generic[E, A]):
    """Tagged value: `state` says how to read `payload`."""

    state: State
    payload: Any = None

    # ─── Constructors ─────────────────────────────────────────────────────────

    @classmethod
    def not_asked(cls) -> "AsyncData[E, A]":
        return cls(State.NOT_ASKED)

    @classmethod
    def loading(cls, prev_data: Optional[A] = None) -> "AsyncData[E, A]":
        return cls(State.LOADING, prev_data)

    @classmethod
    def failure(cls, error: E) -> "AsyncData[E, A]":
        return cls(State.FAILURE, error)

    @classmethod
    def success(cls, data: A) -> "AsyncData[E, A]":
        return cls(State.SUCCESS, data)

    # ─── Predicates ───────────────────────────────────────────────────────────

    def is_not_asked(self) -> bool:
        return self.state is State.NOT_ASKED

    def is_loading(self) -> bool:
        return self.state is State.LOADING

    def is_failure(self) -> bool:
        return self.state is State.FAILURE

    def is_success(self) -> bool:
        return self.state is State.SUCCESS

    # ─── Extractors ───────────────────────────────────────────────────────────

    def get_loading(self) -> Optional[A]:
        """Previous data carried by a Loading value (None otherwise)."""
        return self.payload if self.is_loading() else None

    def get_failure(self) -> Optional[E]:
        return self.payload if self.is_failure() else None

    def get_success(self) -> Optional[A]:
        return self.payload if self.is_success() else None

    # ─── Combinators ──────────────────────────────────────────────────────────

    def map(self, f: Callable[[A], B]) -> "AsyncData[E, B]":
        """
        Transform the data of a Success (or the previous data of a Loading).

        NotAsked, Failure and a Loading without previous data pass through
        unchanged.
        """
        if self.is_success():
            return AsyncData.success(f(self.payload))
        if self.is_loading() and self.payload is not None:
            return AsyncData.loading(f(self.payload))
        return AsyncData(self.state, self.payload)

    def fold(
        self,
        on_not_asked: Callable[[], T],
        on_loading: Callable[[Optional[A]], T],
        on_failure: Callable[[E], T],
        on_success: Callable[[A], T],
    ) -> T:
        """
        Consume the value by handling every state.

        Raises:
            ValueError: if the state tag is not one of the known states.
        """
        handlers = {
            State.NOT_ASKED: lambda: on_not_asked(),
            State.LOADING: lambda: on_loading(self.payload),
            State.FAILURE: lambda: on_failure(self.payload),
            State.SUCCESS: lambda: on_success(self.payload),
        }
        handler = handlers.get(self.state)
        if handler is None:
            raise ValueError(f"unknown AsyncData state: {self.state!r}")
        return handler()
