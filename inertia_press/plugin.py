"""Vite Plugin for Litestar.

This module provides the VitePlugin class for integrating Vite with Litestar.
The plugin handles:

- Static file serving for the production build
- Jinja2 template callable registration
- The ``assets`` CLI command group

Example::

    from litestar import Litestar
    from inertia_press import VitePlugin, ViteConfig

    app = Litestar(
        plugins=[VitePlugin(config=ViteConfig(input="src/main.jsx"))],
    )
"""

from typing import TYPE_CHECKING

from litestar.plugins import CLIPlugin, InitPluginProtocol
from litestar.static_files import create_static_files_router  # pyright: ignore[reportUnknownVariableType]

from inertia_press.assets import AssetResolver
from inertia_press.config import ViteConfig

if TYPE_CHECKING:
    from click import Group
    from litestar.config.app import AppConfig

__all__ = ("VitePlugin",)


class VitePlugin(InitPluginProtocol, CLIPlugin):
    """Vite plugin for Litestar.

    This plugin integrates Vite with Litestar, providing:

    - Static file serving for the build directory
    - The ``vite_assets()`` Jinja2 template callable
    - The ``litestar assets`` CLI commands

    Example::

        from litestar import Litestar
        from inertia_press import VitePlugin, ViteConfig

        app = Litestar(
            plugins=[VitePlugin(config=ViteConfig(input="src/main.jsx"))],
        )
    """

    __slots__ = ("_config", "_resolver")

    def __init__(self, config: "ViteConfig | None" = None) -> None:
        """Initialize the Vite plugin.

        Args:
            config: Vite configuration. Defaults to ``ViteConfig()`` if not provided.
        """
        self._config = config or ViteConfig()
        self._resolver = AssetResolver(self._config)

    @property
    def config(self) -> "ViteConfig":
        return self._config

    @property
    def resolver(self) -> "AssetResolver":
        return self._resolver

    def on_cli_init(self, cli: "Group") -> None:
        """Register CLI commands.

        Args:
            cli: The Click command group to add commands to.
        """
        from inertia_press.cli import assets_group

        cli.add_command(assets_group)

    def _configure_static_files(self, app_config: "AppConfig") -> None:
        """Serve the build directory at ``asset_url``.

        Nothing is served when ``asset_url`` points at another host or the build directory does not exist.

        Args:
            app_config: The Litestar application configuration.
        """
        asset_url = self._config.asset_url or "/"
        build_path = self._config.build_path
        if not asset_url.startswith("/") or not build_path.is_dir():
            return
        app_config.route_handlers.append(
            create_static_files_router(
                directories=[build_path],
                path=asset_url,
                name="vite",
                html_mode=False,
                include_in_schema=False,
            )
        )

    def on_app_init(self, app_config: "AppConfig") -> "AppConfig":
        """Configure the Litestar application for Vite.

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        from inertia_press.template import configure_jinja_callables, render_vite_assets

        if self._config.debug is None:
            self._config.debug = app_config.debug
        configure_jinja_callables(app_config, {"vite_assets": render_vite_assets})
        if self._config.set_static_folders:
            self._configure_static_files(app_config)
        return app_config
