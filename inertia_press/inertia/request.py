from collections.abc import Iterator, Mapping
from functools import cached_property
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import unquote

from litestar import Request
from litestar.connection.base import AuthT, StateT, UserT, empty_receive, empty_send

from inertia_press.inertia._utils import XML_HTTP_REQUEST, InertiaHeaders

if TYPE_CHECKING:
    from litestar.types import Receive, Scope, Send

    from inertia_press.inertia.plugin import InertiaPlugin

__all__ = ("InertiaDetails", "InertiaHeaders", "InertiaRequest", "RequestHeaders")

_DEFAULT_COMPONENT_OPT_KEYS: "tuple[str, ...]" = ("component", "page")


class RequestHeaders(Mapping[str, str]):
    """Read-only request headers keyed by lowercase name."""

    __slots__ = ("_headers",)

    def __init__(self, headers: "Mapping[str, str] | None" = None) -> None:
        self._headers: "dict[str, str]" = {str(k).lower(): str(v) for k, v in (headers or {}).items()}

    @classmethod
    def from_environ(cls, environ: "Mapping[str, Any]") -> "RequestHeaders":
        """Collect headers from a WSGI/CGI style environ.

        ``HTTP_X_INERTIA_PARTIAL_DATA`` becomes ``x-inertia-partial-data``.
        """
        return cls({
            key[5:].replace("_", "-"): value
            for key, value in environ.items()
            if key.startswith("HTTP_") and isinstance(value, str)
        })

    @classmethod
    def from_request(cls, request: "Request[Any, Any, Any]") -> "RequestHeaders":
        return cls(dict(request.headers.items()))

    def __getitem__(self, key: str) -> str:
        return self._headers[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._headers

    def __iter__(self) -> "Iterator[str]":
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"RequestHeaders({self._headers!r})"


class InertiaDetails:
    """InertiaDetails holds all the values sent by Inertia client in headers and provide convenient properties."""

    def __init__(
        self,
        headers: "Mapping[str, str]",
        route_component: "str | None" = None,
        request: "Request[Any, Any, Any] | None" = None,
    ) -> None:
        """Initialize :class:`InertiaDetails`

        Args:
            headers: The request headers.
            route_component: The component configured on the route handler, if any.
            request: The request to look the route component up on when ``route_component`` is not given.
        """
        self.headers = headers if isinstance(headers, RequestHeaders) else RequestHeaders(headers)
        self._route_component = route_component
        self._request = request

    @classmethod
    def from_request(cls, request: "Request[Any, Any, Any]") -> "InertiaDetails":
        return cls(RequestHeaders.from_request(request), request=request)

    @cached_property
    def route_component(self) -> "str | None":
        """Return the component configured on the route handler."""
        if self._route_component is not None or self._request is None:
            return self._route_component
        return _get_route_component(self._request)

    def _get_header_value(self, name: "InertiaHeaders") -> "str | None":
        """Parse request header

        Check for uri encoded header and unquotes it in readable format.

        Args:
            name: The header name.

        Returns:
            The header value.
        """
        if value := self.headers.get(name.value.lower()):
            is_uri_encoded = self.headers.get(f"{name.value.lower()}-uri-autoencoded") == "true"
            return unquote(value) if is_uri_encoded else value
        return None

    def __bool__(self) -> bool:
        """Return True when the request is sent by an Inertia client.

        Both ``X-Requested-With: XMLHttpRequest`` and ``X-Inertia: true`` are required.
        """
        return (
            self._get_header_value(InertiaHeaders.REQUESTED_WITH) == XML_HTTP_REQUEST
            and self._get_header_value(InertiaHeaders.ENABLED) == "true"
        )

    @cached_property
    def partial_component(self) -> "str | None":
        return self._get_header_value(InertiaHeaders.PARTIAL_COMPONENT)

    @cached_property
    def partial_data(self) -> "str | None":
        return self._get_header_value(InertiaHeaders.PARTIAL_DATA)

    @cached_property
    def partial_keys(self) -> "set[str]":
        """Return parsed partial-data keys.

        Blank entries are ignored, so a malformed header yields an empty set.
        """
        if self.partial_data is None:
            return set()
        return {key.strip() for key in self.partial_data.split(",") if key.strip()}

    def partial_keys_for(self, component: str) -> "set[str] | None":
        """Return the partial keys when the partial reload targets ``component``.

        Args:
            component: The component being rendered.

        Returns:
            The requested keys, or ``None`` when this is not a partial reload of ``component``.
        """
        if self.partial_component != component or not self.partial_keys:
            return None
        return self.partial_keys

    @property
    def is_partial_render(self) -> bool:
        return self.route_component is not None and self.partial_keys_for(self.route_component) is not None


def _get_route_component(request: "Request[Any, Any, Any]") -> "str | None":
    """Return the route component from handler opts if present."""
    rh = request.scope.get("route_handler")  # pyright: ignore[reportUnknownMemberType]
    if not rh:
        return None
    component_opt_keys: "tuple[str, ...]" = _DEFAULT_COMPONENT_OPT_KEYS
    try:
        inertia_plugin: "InertiaPlugin" = request.app.plugins.get("InertiaPlugin")
        component_opt_keys = inertia_plugin.config.component_opt_keys
    except KeyError:
        pass
    for key in component_opt_keys:
        if (value := rh.opt.get(key)) is not None:
            return cast("str", value)
    return None


class InertiaRequest(Request[UserT, AuthT, StateT]):
    """Inertia Request class to work with Inertia client."""

    __slots__ = ("inertia",)

    def __init__(self, scope: "Scope", receive: "Receive" = empty_receive, send: "Send" = empty_send) -> None:
        """Initialize :class:`InertiaRequest`"""
        super().__init__(scope=scope, receive=receive, send=send)
        self.inertia = InertiaDetails.from_request(self)

    @property
    def is_inertia(self) -> bool:
        """True if the request was sent by the Inertia client."""
        return bool(self.inertia)

    @property
    def inertia_enabled(self) -> bool:
        """True if the route handler names an Inertia component."""
        return self.inertia.route_component is not None

    @property
    def is_partial_render(self) -> bool:
        return self.inertia.is_partial_render

    @property
    def partial_keys(self) -> "set[str]":
        return set(self.inertia.partial_keys)
