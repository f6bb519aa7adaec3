"""Reference-counted, read-only handle to a test's state.

A SharedState lets the test body and ``after`` observe the same state
instance without copying it. Clones share one cell whose reference count is
guarded by a ``threading.Lock``, so handles may be passed to (and released
from) whichever worker thread the event loop runs on. The lock protects only
the count; reads of the state itself are unsynchronized.
"""

import logging
import threading
from typing import Any, Generic, TypeVar, cast

from .exceptions import StateReleasedError

logger = logging.getLogger(__name__)

S = TypeVar("S")

# Sentinel stored in a cell once its last handle is released
_RELEASED: object = object()


class _Cell(Generic[S]):
    """Storage shared by every handle of one lineage."""

    __slots__ = ("value", "type_name", "refs", "lock")

    def __init__(self, value: S) -> None:
        self.value: Any = value
        self.type_name = type(value).__name__
        self.refs = 1
        self.lock = threading.Lock()


class SharedState(Generic[S]):
    """
    Shared-ownership, read-only handle to a state value.

    Attribute reads are delegated to the wrapped state, so ``handle.client``
    is equivalent to ``handle.state.client``. The handle itself cannot be
    rebound or assigned to; state mutation goes through the state's own
    attributes (e.g. ``handle.state.counter = 1``).

    The wrapped value is dropped when the last handle of the lineage is
    released. Reading through a released handle raises StateReleasedError.

    Example:
        handle = SharedState(state)
        body_handle = handle.clone()
        assert body_handle.state is handle.state
        body_handle.release()
        handle.release()  # last reference: state is dropped
    """

    __slots__ = ("_cell", "_released")

    def __init__(self, value: S) -> None:
        object.__setattr__(self, "_cell", _Cell(value))
        object.__setattr__(self, "_released", False)

    @classmethod
    def _attach(cls, cell: "_Cell[S]") -> "SharedState[S]":
        with cell.lock:
            if cell.refs == 0:
                raise StateReleasedError(cell.type_name)
            cell.refs += 1
        handle = cls.__new__(cls)
        object.__setattr__(handle, "_cell", cell)
        object.__setattr__(handle, "_released", False)
        return handle

    # -------------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------------

    def clone(self) -> "SharedState[S]":
        """Create another handle to the same state (no copy)."""
        if self._released:
            raise StateReleasedError(self._cell.type_name)
        return self._attach(self._cell)

    def release(self) -> None:
        """
        Drop this handle.

        Idempotent per handle. Releasing the last handle of the lineage
        drops the reference to the wrapped state.
        """
        cell = self._cell
        with cell.lock:
            if self._released:
                return
            object.__setattr__(self, "_released", True)
            cell.refs -= 1
            last = cell.refs == 0
            if last:
                cell.value = _RELEASED
        if last:
            logger.debug("Released last handle to %s", cell.type_name)

    @property
    def refcount(self) -> int:
        """Number of live handles in this lineage."""
        return self._cell.refs

    @property
    def released(self) -> bool:
        """True if this handle was released."""
        return self._released

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> S:
        """The wrapped state."""
        if self._released or self._cell.value is _RELEASED:
            raise StateReleasedError(self._cell.type_name)
        return cast(S, self._cell.value)

    def __getattr__(self, name: str) -> Any:
        if name in SharedState.__slots__:
            raise AttributeError(name)
        return getattr(self.state, name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(
            f"SharedState is read-only; assign through .state.{name} if the state allows it"
        )

    def __delattr__(self, name: str) -> None:
        raise AttributeError("SharedState is read-only")

    def __repr__(self) -> str:
        status = "released" if self._released else f"refs={self._cell.refs}"
        return f"SharedState({self._cell.type_name}, {status})"

    # -------------------------------------------------------------------------
    # Context managers
    # -------------------------------------------------------------------------

    def __enter__(self) -> "SharedState[S]":
        return self

    def __exit__(self, *args: Any) -> None:
        self.release()

    async def __aenter__(self) -> "SharedState[S]":
        return self

    async def __aexit__(self, *args: Any) -> None:
        self.release()
