from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import httpx
from anyio.from_thread import start_blocking_portal
from litestar.plugins import InitPluginProtocol

from inertia_press.config import InertiaConfig
from inertia_press.inertia.renderer import PageRenderer

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from anyio.from_thread import BlockingPortal
    from litestar import Litestar
    from litestar.config.app import AppConfig

__all__ = ("InertiaPlugin",)


class InertiaPlugin(InitPluginProtocol):
    """Inertia plugin.

    This plugin configures Litestar for Inertia.js support:

    - :class:`InertiaRequest` and :class:`InertiaResponse` as default classes
    - Type encoders for :class:`Value` and :class:`Deferred` props
    - The ``inertia()`` and ``inertia_head()`` template callables

    During the app lifespan it holds a ``BlockingPortal`` for async lazy props
    and, when SSR is enabled, a pooled ``httpx.Client`` for the SSR sidecar.

    Example::

        from inertia_press import InertiaConfig, InertiaPlugin, ViteConfig, VitePlugin

        app = Litestar(
            plugins=[VitePlugin(config=ViteConfig(input="src/main.jsx")), InertiaPlugin(InertiaConfig())],
            template_config=TemplateConfig(engine=JinjaTemplateEngine, directory="templates"),
        )
    """

    __slots__ = ("_portal", "_renderer", "_ssr_client", "config")

    def __init__(self, config: "InertiaConfig | None" = None) -> "None":
        """Initialize the plugin with Inertia configuration."""
        self.config = config or InertiaConfig()
        self._portal: "BlockingPortal | None" = None
        self._ssr_client: "httpx.Client | None" = None
        self._renderer: "PageRenderer | None" = None

    @asynccontextmanager
    async def lifespan(self, app: "Litestar") -> "AsyncGenerator[None, None]":
        """Hold the blocking portal and the SSR client for the lifetime of the app.

        Args:
            app: The :class:`Litestar <litestar.app.Litestar>` instance.

        Yields:
            An asynchronous context manager.
        """
        if self.config.ssr_endpoint is not None:
            limits = httpx.Limits(max_keepalive_connections=10, max_connections=20, keepalive_expiry=30.0)
            self._ssr_client = httpx.Client(limits=limits, timeout=httpx.Timeout(self.config.ssr_timeout))
        try:
            with start_blocking_portal() as portal:
                self._portal = portal
                yield
        finally:
            self._portal = None
            if self._ssr_client is not None:
                self._ssr_client.close()
                self._ssr_client = None

    @property
    def portal(self) -> "BlockingPortal | None":
        """Return the blocking portal, or ``None`` outside the app lifespan.

        Async lazy props open a short lived portal of their own when this is ``None``.
        """
        return self._portal

    @property
    def ssr_client(self) -> "httpx.Client | None":
        return self._ssr_client

    def get_renderer(self, app: "Litestar") -> PageRenderer:
        """Return the page renderer, bound to the Vite manifest version when :class:`VitePlugin` is installed.

        Args:
            app: The application.

        Returns:
            The renderer.
        """
        if self._renderer is None:
            from inertia_press.plugin import VitePlugin

            version_provider: "Callable[[], str] | None" = None
            try:
                version_provider = app.plugins.get(VitePlugin).resolver.version_id
            except KeyError:
                version_provider = None
            self._renderer = PageRenderer(self.config, version_provider=version_provider)
        return self._renderer

    def on_app_init(self, app_config: "AppConfig") -> "AppConfig":
        """Configure application for use with Inertia.

        Args:
            app_config: The :class:`AppConfig <litestar.config.app.AppConfig>` instance.

        Returns:
            The :class:`AppConfig <litestar.config.app.AppConfig>` instance.
        """
        from inertia_press.inertia.props import Deferred, Value
        from inertia_press.inertia.request import InertiaRequest
        from inertia_press.inertia.response import InertiaResponse
        from inertia_press.template import configure_jinja_callables, render_inertia_head, render_inertia_root

        app_config.request_class = InertiaRequest
        app_config.response_class = InertiaResponse
        app_config.signature_types.extend([InertiaRequest, InertiaResponse, Value, Deferred])
        type_encoders: "dict[Any, Callable[[Any], Any]]" = {
            Value: lambda val: val.resolve(),
            Deferred: lambda val: val.resolve(portal=self._portal),
        }
        app_config.type_encoders = {**type_encoders, **(app_config.type_encoders or {})}
        configure_jinja_callables(app_config, {"inertia": render_inertia_root, "inertia_head": render_inertia_head})
        app_config.lifespan.append(self.lifespan)  # pyright: ignore[reportUnknownMemberType]
        return app_config
