"""Prop values and the filtering / resolution passes applied to them.

A prop is either a plain value, a :class:`Value` wrapper, a zero-argument
callable, a nested mapping of the same, or a :class:`Deferred` value. Deferred
values (built with :func:`lazy`) are only included when a partial reload
asks for them by key, and are only invoked once they survive filtering.
"""

import inspect
from collections.abc import Callable, Coroutine, Generator, Mapping
from contextlib import contextmanager
from typing import Any, Generic, TypeGuard, TypeVar, cast

from anyio.from_thread import BlockingPortal, start_blocking_portal

__all__ = (
    "Deferred",
    "Value",
    "filter_props",
    "is_deferred",
    "lazy",
    "resolve_props",
)

T = TypeVar("T")


class Value(Generic[T]):
    """An eager prop value."""

    __slots__ = ("value",)

    def __init__(self, value: "T") -> None:
        self.value = value

    def resolve(self, portal: "BlockingPortal | None" = None) -> "T":
        return self.value

    def __repr__(self) -> str:
        return f"Value({self.value!r})"


class Deferred(Generic[T]):
    """A prop computed only when a partial reload requests it.

    The callable may be sync or async. Every call to :meth:`resolve` invokes
    it again, so one instance can be shared between requests.
    """

    __slots__ = ("_callback",)

    def __init__(self, callback: "Callable[[], T | Coroutine[Any, Any, T]]") -> None:
        if not callable(callback):
            msg = f"Deferred props need a callable, got {type(callback).__name__}."
            raise TypeError(msg)
        self._callback = callback

    @staticmethod
    @contextmanager
    def with_portal(portal: "BlockingPortal | None" = None) -> "Generator[BlockingPortal, None, None]":
        if portal is None:
            with start_blocking_portal() as p:
                yield p
        else:
            yield portal

    def resolve(self, portal: "BlockingPortal | None" = None) -> "T":
        if inspect.iscoroutinefunction(self._callback):
            with self.with_portal(portal) as p:
                return p.call(cast("Callable[[], Coroutine[Any, Any, T]]", self._callback))
        return cast("T", self._callback())

    def __repr__(self) -> str:
        return f"Deferred({self._callback!r})"


def lazy(callback: "Callable[[], T | Coroutine[Any, Any, T]]") -> "Deferred[T]":
    """Wrap a callable into a lazy prop.

    Args:
        callback: A zero-argument callable (sync or async) producing the value.

    Returns:
        The deferred prop.

    Example::

        return {"users": lazy(lambda: User.all())}
    """
    return Deferred(callback)


def is_deferred(value: "Any") -> "TypeGuard[Deferred[Any]]":
    return isinstance(value, Deferred)


def _drop_deferred(value: "Any") -> "Any":
    if isinstance(value, Mapping):
        return {k: _drop_deferred(v) for k, v in cast("Mapping[str, Any]", value).items() if not is_deferred(v)}
    if isinstance(value, (list, tuple)):
        kept = (_drop_deferred(v) for v in cast("list[Any]", value) if not is_deferred(v))
        return type(value)(kept)  # pyright: ignore
    return value


def filter_props(props: "Mapping[str, Any]", partial_keys: "set[str] | None" = None) -> "dict[str, Any]":
    """Select the props a response will carry.

    With ``partial_keys`` the result holds exactly the requested keys present
    in ``props``, deferred or not. Without, every deferred value is dropped,
    at any depth of mappings, lists and tuples.

    Nothing is invoked here.

    Args:
        props: The merged props.
        partial_keys: Keys requested by a partial reload, or ``None``.

    Returns:
        The selected props.
    """
    if partial_keys:
        return {key: value for key, value in props.items() if key in partial_keys}
    return cast("dict[str, Any]", _drop_deferred(props))


def resolve_props(value: "T", portal: "BlockingPortal | None" = None) -> "T":
    """Replace deferred values, ``Value`` wrappers and zero-argument callables with their results.

    Mappings, lists and tuples are walked recursively, including whatever a
    callable returns.

    Args:
        value: The prop tree.
        portal: Optional portal used to run async deferred callables.

    Returns:
        The resolved tree.
    """
    if isinstance(value, (str, bytes)):
        return value
    if isinstance(value, (Deferred, Value)):
        return cast("T", resolve_props(value.resolve(portal), portal))
    if isinstance(value, Mapping):
        return cast("T", {k: resolve_props(v, portal) for k, v in cast("Mapping[str, Any]", value).items()})
    if isinstance(value, (list, tuple)):
        return cast("T", type(value)(resolve_props(v, portal) for v in cast("list[Any]", value)))  # pyright: ignore
    if callable(value) and not isinstance(value, type) and _takes_no_arguments(value):
        return cast("T", resolve_props(Deferred(value).resolve(portal), portal))
    return value


def _takes_no_arguments(func: "Callable[..., Any]") -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    return all(
        p.default is not p.empty or p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD) for p in signature.parameters.values()
    )
