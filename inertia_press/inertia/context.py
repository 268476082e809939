"""Request-scoped Inertia state.

Shared props, the version tag and the current page object live on an
:class:`InertiaContext` stored in the ASGI scope of the request being
handled. Nothing is kept in module globals, so a long lived process never
carries props from one request into the next.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast, overload

if TYPE_CHECKING:
    from litestar.connection import ASGIConnection

    from inertia_press.inertia.ssr import SSRResult
    from inertia_press.inertia.types import PageObject

__all__ = ("SCOPE_KEY", "InertiaContext", "get_context", "share")

SCOPE_KEY = "_inertia_press_context"


class InertiaContext:
    """Per-request Inertia state."""

    __slots__ = ("_shared", "page", "ssr", "version")

    def __init__(self, version: "str | None" = None) -> None:
        self._shared: "dict[str, Any]" = {}
        self.version = version
        self.page: "PageObject | None" = None
        self.ssr: "SSRResult | None" = None

    @overload
    def share(self, key: str, value: Any) -> None: ...

    @overload
    def share(self, key: "Mapping[str, Any]") -> None: ...

    def share(self, key: "str | Mapping[str, Any]", value: Any = None) -> None:
        """Add props to every page rendered for this request.

        Args:
            key: A prop name, or a mapping of props to merge in.
            value: The prop value when ``key`` is a name.
        """
        if isinstance(key, Mapping):
            self._shared.update(cast("Mapping[str, Any]", key))
        else:
            self._shared[key] = value

    @property
    def shared_props(self) -> "dict[str, Any]":
        return dict(self._shared)

    def set_version(self, version: str) -> None:
        self.version = version


def get_context(connection: "ASGIConnection[Any, Any, Any, Any]") -> InertiaContext:
    """Return the context of the request, creating it on first access.

    Args:
        connection: The ASGI connection.

    Returns:
        The request's context.
    """
    scope = cast("dict[str, Any]", connection.scope)
    context = scope.get(SCOPE_KEY)
    if context is None:
        context = scope[SCOPE_KEY] = InertiaContext()
    return cast("InertiaContext", context)


def share(connection: "ASGIConnection[Any, Any, Any, Any]", key: "str | Mapping[str, Any]", value: Any = None) -> None:
    """Share props with every page rendered for the current request.

    Args:
        connection: The ASGI connection.
        key: A prop name, or a mapping of props.
        value: The value when ``key`` is a name.
    """
    get_context(connection).share(key, value)
