import itertools
from collections.abc import Iterable, Mapping
from mimetypes import guess_type
from pathlib import PurePath
from typing import TYPE_CHECKING, Any, TypeVar, cast

from litestar import MediaType, Request, Response
from litestar.exceptions import ImproperlyConfiguredException
from litestar.response.base import ASGIResponse
from litestar.serialization import get_serializer
from litestar.status_codes import HTTP_200_OK
from litestar.utils.helpers import get_enum_string_value

from inertia_press.inertia._utils import get_headers
from inertia_press.inertia.context import get_context
from inertia_press.inertia.plugin import InertiaPlugin
from inertia_press.inertia.request import InertiaDetails, InertiaRequest
from inertia_press.inertia.ssr import render_ssr
from inertia_press.inertia.types import InertiaHeaderType, PageObject

if TYPE_CHECKING:
    from litestar.app import Litestar
    from litestar.background_tasks import BackgroundTask, BackgroundTasks
    from litestar.connection.base import AuthT, StateT, UserT
    from litestar.datastructures.cookie import Cookie
    from litestar.types import ResponseCookies, ResponseHeaders, TypeEncodersMap

__all__ = ("InertiaResponse",)

T = TypeVar("T")


def _get_relative_url(request: "Request[Any, Any, Any]") -> str:
    """Return the path with the query string, as the Inertia client expects in ``url``."""
    path = request.url.path
    query = request.url.query
    return f"{path}?{query}" if query else path


def _get_details(request: "Request[Any, Any, Any]") -> InertiaDetails:
    if isinstance(request, InertiaRequest):
        return cast("InertiaDetails", request.inertia)
    return InertiaDetails.from_request(request)


class InertiaResponse(Response[T]):
    """Inertia Response

    Renders the page object as JSON for Inertia client visits, and the root
    template embedding the page object for every other request. Routes without
    an Inertia component get a plain response.
    """

    def __init__(
        self,
        content: T,
        *,
        component: "str | None" = None,
        template_name: "str | None" = None,
        template_str: "str | None" = None,
        background: "BackgroundTask | BackgroundTasks | None" = None,
        context: "dict[str, Any] | None" = None,
        cookies: "ResponseCookies | None" = None,
        encoding: "str" = "utf-8",
        headers: "ResponseHeaders | None" = None,
        media_type: "MediaType | str | None" = None,
        status_code: "int" = HTTP_200_OK,
        type_encoders: "TypeEncodersMap | None" = None,
    ) -> None:
        """Handle the rendering of a given template into a bytes string.

        Args:
            content: The page props. Mappings are used as the props; any other value is placed under ``content``.
            component: The client component to render. Defaults to the ``component`` opt of the route handler.
            template_name: Path-like name for the root template, e.g. ``index.html``.
                Defaults to ``InertiaConfig.root_template``.
            template_str: A string representing the root template.
            background: A :class:`BackgroundTask <.background_tasks.BackgroundTask>` instance or
                :class:`BackgroundTasks <.background_tasks.BackgroundTasks>` to execute after the response is finished.
            context: Extra key/value pairs passed to the template engine's render method.
            cookies: A list of :class:`Cookie <.datastructures.Cookie>` instances to be set under the response
                ``Set-Cookie`` header.
            encoding: Content encoding
            headers: A string keyed dictionary of response headers. Header keys are insensitive.
            media_type: A string or member of the :class:`MediaType <.enums.MediaType>` enum.
            status_code: A value for the response HTTP status code.
            type_encoders: A mapping of types to callables that transform them into types supported for serialization.

        Raises:
            ValueError: If both template_name and template_str are provided.
        """
        if template_name and template_str:
            msg = "Either template_name or template_str must be provided, not both."
            raise ValueError(msg)
        super().__init__(
            content=content,
            background=background,
            cookies=cookies,
            encoding=encoding,
            headers=headers,
            media_type=media_type,
            status_code=status_code,
            type_encoders=type_encoders,
        )
        self.component = component
        self.context = context or {}
        self.template_name = template_name
        self.template_str = template_str

    def page_props(self) -> "dict[str, Any]":
        if self.content is None:
            return {}
        if isinstance(self.content, Mapping):
            return dict(cast("Mapping[str, Any]", self.content))
        return {"content": self.content}

    def create_template_context(
        self,
        request: "Request[UserT, AuthT, StateT]",
        page: PageObject,
        type_encoders: "TypeEncodersMap | None" = None,
    ) -> "dict[str, Any]":
        """Create a context object for the root template.

        Args:
            request: A :class:`Request <.connection.Request>` instance.
            page: The page object.
            type_encoders: A mapping of types to callables that transform them into types supported for serialization.

        Returns:
            A dictionary holding the template context
        """
        page_json = self.render(page.to_dict(), MediaType.JSON, get_serializer(type_encoders)).decode()
        return {
            **self.context,
            "page_json": page_json,
            "page": page,
            "request": request,
        }

    def _render_template(
        self,
        request: "Request[UserT, AuthT, StateT]",
        page: PageObject,
        type_encoders: "TypeEncodersMap | None",
        inertia_plugin: InertiaPlugin,
    ) -> bytes:
        template_engine = request.app.template_engine  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
        if not template_engine:
            msg = "Template engine is not configured"
            raise ImproperlyConfiguredException(msg)

        context = self.create_template_context(request, page, type_encoders)
        if self.template_str is not None:
            return template_engine.render_string(self.template_str, context).encode(self.encoding)  # pyright: ignore

        template_name = self.template_name or inertia_plugin.config.root_template
        template = template_engine.get_template(template_name)  # pyright: ignore
        return template.render(**context).encode(self.encoding)  # pyright: ignore

    def _determine_media_type(self, media_type: "MediaType | str | None") -> "MediaType | str":
        if media_type:
            return media_type
        if self.template_name:
            for suffix in PurePath(self.template_name).suffixes:
                if type_ := guess_type(f"name{suffix}")[0]:
                    return type_
        return MediaType.HTML

    def to_asgi_response(
        self,
        app: "Litestar | None",
        request: "Request[UserT, AuthT, StateT]",
        *,
        background: "BackgroundTask | BackgroundTasks | None" = None,
        cookies: "Iterable[Cookie] | None" = None,
        encoded_headers: "Iterable[tuple[bytes, bytes]] | None" = None,
        headers: "dict[str, str] | None" = None,
        is_head_response: "bool" = False,
        media_type: "MediaType | str | None" = None,
        status_code: "int | None" = None,
        type_encoders: "TypeEncodersMap | None" = None,
    ) -> "ASGIResponse":
        details = _get_details(cast("Request[Any, Any, Any]", request))
        headers = {**headers, **self.headers} if headers is not None else dict(self.headers)
        cookies = self.cookies if cookies is None else itertools.chain(self.cookies, cookies)
        type_encoders = (
            {**type_encoders, **(self.response_type_encoders or {})} if type_encoders else self.response_type_encoders
        )
        component = self.component or details.route_component

        if component is None:
            resolved_media_type = get_enum_string_value(self.media_type or media_type or MediaType.JSON)
            return ASGIResponse(
                background=self.background or background,
                body=self.render(self.content, resolved_media_type, get_serializer(type_encoders)),
                cookies=cookies,
                encoded_headers=encoded_headers,
                encoding=self.encoding,
                headers=headers,
                is_head_response=is_head_response,
                media_type=resolved_media_type,
                status_code=self.status_code or status_code,
            )

        inertia_plugin = request.app.plugins.get(InertiaPlugin)
        context = get_context(request)
        page = inertia_plugin.get_renderer(request.app).render(
            component,
            self.page_props(),
            context=context,
            headers=details,
            url=_get_relative_url(cast("Request[Any, Any, Any]", request)),
            portal=inertia_plugin.portal,
        )

        if details:
            headers.update(get_headers(InertiaHeaderType(enabled=True, vary="Accept")))
            resolved_media_type = get_enum_string_value(self.media_type or media_type or MediaType.JSON)
            return ASGIResponse(
                background=self.background or background,
                body=self.render(page.to_dict(), resolved_media_type, get_serializer(type_encoders)),
                cookies=cookies,
                encoded_headers=encoded_headers,
                encoding=self.encoding,
                headers=headers,
                is_head_response=is_head_response,
                media_type=resolved_media_type,
                status_code=self.status_code or status_code,
            )

        if (ssr_url := inertia_plugin.config.ssr_endpoint) is not None:
            context.ssr = render_ssr(
                page, ssr_url, timeout=inertia_plugin.config.ssr_timeout, client=inertia_plugin.ssr_client
            )

        return ASGIResponse(
            background=self.background or background,
            body=self._render_template(request, page, type_encoders, inertia_plugin),
            cookies=cookies,
            encoded_headers=encoded_headers,
            encoding=self.encoding,
            headers=headers,
            is_head_response=is_head_response,
            media_type=self._determine_media_type(media_type),
            status_code=self.status_code or status_code,
        )
