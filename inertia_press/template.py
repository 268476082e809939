"""Jinja2 template callables.

``vite_assets()`` emits the link and script tags of the Vite entry point,
``inertia()`` the root element carrying the page object (or the server
rendered markup) and ``inertia_head()`` the head tags returned by the SSR
sidecar.
"""

from typing import TYPE_CHECKING, Any, cast

import markupsafe

from inertia_press.assets import AssetRegistry
from inertia_press.html import root_element
from inertia_press.inertia.context import get_context

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from litestar.config.app import AppConfig
    from litestar.connection import Request

    from inertia_press.inertia.plugin import InertiaPlugin
    from inertia_press.plugin import VitePlugin

__all__ = (
    "configure_jinja_callables",
    "get_asset_registry",
    "render_inertia_head",
    "render_inertia_root",
    "render_vite_assets",
)

ASSET_REGISTRY_SCOPE_KEY = "_inertia_press_assets"


def _get_request_from_context(context: "Mapping[str, Any]") -> "Request[Any, Any, Any]":
    """Get the request from the template context.

    Args:
        context: The template context.

    Returns:
        The request object from the template context.

    Raises:
        ValueError: If 'request' is not found in the template context.
        TypeError: If 'request' is not a Litestar Request object.
    """
    from litestar.connection import Request

    request = context.get("request")
    if request is None:
        msg = "Request not found in template context. Ensure 'request' is passed to the template."
        raise ValueError(msg)
    if not isinstance(request, Request):  # pyright: ignore[reportUnknownVariableType]
        msg = f"Expected Request object, got {type(request)}"
        raise TypeError(msg)
    return request  # pyright: ignore[reportReturnType,reportUnknownVariableType]


def _get_plugin(request: "Request[Any, Any, Any]", name: str) -> Any:
    try:
        return request.app.plugins.get(name)
    except KeyError:
        return None


def get_asset_registry(request: "Request[Any, Any, Any]") -> AssetRegistry:
    """Return the asset registry of the request, so handles are only emitted once per page."""
    scope = cast("dict[str, Any]", request.scope)
    registry = scope.get(ASSET_REGISTRY_SCOPE_KEY)
    if registry is None:
        registry = scope[ASSET_REGISTRY_SCOPE_KEY] = AssetRegistry()
    return cast("AssetRegistry", registry)


def render_vite_assets(context: "Mapping[str, Any]", /, entry: "str | None" = None) -> "markupsafe.Markup":
    """Render the tags of a Vite entry point.

    This is a Jinja2 template callable. In hot mode it emits the Vite client
    and the entry module served by the dev server, in build mode the hashed
    bundle and its stylesheets.

    Args:
        context: The template context containing the request.
        entry: The entry point. Defaults to ``ViteConfig.input``.

    Returns:
        HTML markup for the asset tags, or empty markup if VitePlugin is not registered.

    Example:
        In a Jinja2 template:
        {{ vite_assets() }}
        {{ vite_assets("src/admin.jsx") }}
    """
    request = _get_request_from_context(context)
    vite_plugin: "VitePlugin | None" = _get_plugin(request, "VitePlugin")
    if vite_plugin is None:
        return markupsafe.Markup("")
    resolver = vite_plugin.resolver
    return resolver.emit(resolver.prepare(entry, get_asset_registry(request)))


def render_inertia_root(context: "Mapping[str, Any]", /) -> "markupsafe.Markup":
    """Render the element the client application mounts on.

    The server rendered body replaces the element when SSR succeeded.

    Args:
        context: The template context containing the request.

    Returns:
        HTML markup for the root element.
    """
    request = _get_request_from_context(context)
    inertia_context = get_context(request)
    if inertia_context.ssr is not None:
        return markupsafe.Markup(inertia_context.ssr.body)
    page_json = context.get("page_json")
    if page_json is None:
        page_json = inertia_context.page.to_json() if inertia_context.page is not None else "{}"
    inertia_plugin: "InertiaPlugin | None" = _get_plugin(request, "InertiaPlugin")
    root_id = inertia_plugin.config.root_id if inertia_plugin is not None else "app"
    return root_element(root_id, str(page_json)).render()


def render_inertia_head(context: "Mapping[str, Any]", /) -> "markupsafe.Markup":
    """Render the head tags returned by the SSR sidecar, empty without SSR."""
    request = _get_request_from_context(context)
    ssr = get_context(request).ssr
    if ssr is None:
        return markupsafe.Markup("")
    return markupsafe.Markup("\n".join(ssr.head))


def configure_jinja_callables(
    app_config: "AppConfig", callables: "dict[str, Callable[..., markupsafe.Markup]]"
) -> None:
    """Register template callables on a Jinja2 template engine.

    Nothing happens when the application is not configured with Jinja2.

    Args:
        app_config: The Litestar application configuration.
        callables: Template callables keyed by the name templates call them with.
    """
    from litestar.contrib.jinja import JinjaTemplateEngine

    template_config = app_config.template_config  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
    if template_config and isinstance(
        template_config.engine_instance,  # pyright: ignore[reportUnknownMemberType]
        JinjaTemplateEngine,
    ):
        engine = template_config.engine_instance  # pyright: ignore[reportUnknownMemberType]
        for key, template_callable in callables.items():
            engine.register_template_callable(key=key, template_callable=template_callable)
