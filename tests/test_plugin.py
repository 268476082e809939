from pathlib import Path
from typing import Any

import pytest
from litestar import get
from litestar.status_codes import HTTP_200_OK, HTTP_404_NOT_FOUND
from litestar.template.config import TemplateConfig
from litestar.testing import create_test_client  # pyright: ignore[reportUnknownVariableType]

from inertia_press.config import ViteConfig
from inertia_press.inertia import InertiaPlugin, InertiaRequest, InertiaResponse
from inertia_press.plugin import VitePlugin

pytestmark = pytest.mark.anyio


def test_plugins_configure_app(
    inertia_plugin: InertiaPlugin,
    vite_plugin: VitePlugin,
    template_config: TemplateConfig,  # pyright: ignore[reportMissingTypeArgument,reportUnknownParameterType]
) -> None:
    with create_test_client(
        route_handlers=[], plugins=[inertia_plugin, vite_plugin], template_config=template_config
    ) as client:
        app = client.app
        assert app.request_class is InertiaRequest
        assert app.response_class is InertiaResponse
        assert app.plugins.get(VitePlugin) is vite_plugin
        assert inertia_plugin.portal is not None
        assert inertia_plugin.ssr_client is None
        engine: Any = template_config.engine_instance
        assert {"vite_assets", "inertia", "inertia_head"} <= set(engine.engine.globals)

    assert inertia_plugin.portal is None


def test_debug_follows_app(tmp_path: Path) -> None:
    plugin = VitePlugin(config=ViteConfig(root_dir=tmp_path))
    with create_test_client(route_handlers=[], plugins=[plugin], debug=True):
        assert plugin.config.debug is True

    explicit = VitePlugin(config=ViteConfig(root_dir=tmp_path, debug=False))
    with create_test_client(route_handlers=[], plugins=[explicit], debug=True):
        assert explicit.config.debug is False


def test_static_files_are_served(vite_plugin: VitePlugin, manifest_file: Path) -> None:
    asset = manifest_file.parent / "assets" / "main-4f2a9b.js"
    asset.parent.mkdir()
    asset.write_text("console.log('hi')")

    with create_test_client(route_handlers=[], plugins=[vite_plugin]) as client:
        response = client.get("/build/assets/main-4f2a9b.js")
        assert response.status_code == HTTP_200_OK
        assert response.text == "console.log('hi')"
        assert client.get("/build/assets/missing.js").status_code == HTTP_404_NOT_FOUND


def test_static_files_skipped_for_remote_asset_url(tmp_path: Path, manifest_file: Path) -> None:
    plugin = VitePlugin(config=ViteConfig(root_dir=tmp_path, asset_url="https://cdn.example.com/build/"))

    with create_test_client(route_handlers=[], plugins=[plugin]) as client:
        assert not any(route.path.startswith("/build") for route in client.app.routes)


def test_vite_assets_template_callable_in_hot_mode(
    vite_plugin: VitePlugin,
    template_config: TemplateConfig,  # pyright: ignore[reportMissingTypeArgument,reportUnknownParameterType]
    hot_file: Path,
) -> None:
    @get("/")
    async def handler() -> InertiaResponse[Any]:
        return InertiaResponse({}, component="Home", template_str="{{ vite_assets() }}\n{{ vite_assets() }}")

    with create_test_client(
        route_handlers=[handler], plugins=[InertiaPlugin(), vite_plugin], template_config=template_config
    ) as client:
        body = client.get("/").text

    assert body.count('src="http://localhost:5173/@vite/client"') == 1
    assert body.count('src="http://localhost:5173/src/main.jsx"') == 1
    assert "RefreshRuntime" in body


def test_vite_assets_explicit_entry(
    vite_plugin: VitePlugin,
    template_config: TemplateConfig,  # pyright: ignore[reportMissingTypeArgument,reportUnknownParameterType]
    manifest_file: Path,
) -> None:
    @get("/")
    async def handler() -> InertiaResponse[Any]:
        return InertiaResponse({}, component="Admin", template_str="{{ vite_assets('src/admin.jsx') }}")

    with create_test_client(
        route_handlers=[handler], plugins=[InertiaPlugin(), vite_plugin], template_config=template_config
    ) as client:
        body = client.get("/").text

    assert body == '<script type="module" id="inertia-press-js" src="/build/assets/admin-9e8d.js"></script>'


def test_inertia_head_without_ssr(
    template_config: TemplateConfig,  # pyright: ignore[reportMissingTypeArgument,reportUnknownParameterType]
) -> None:
    @get("/")
    async def handler() -> InertiaResponse[Any]:
        return InertiaResponse({}, component="Home", template_str="[{{ inertia_head() }}]")

    with create_test_client(
        route_handlers=[handler], plugins=[InertiaPlugin()], template_config=template_config
    ) as client:
        response = client.get("/")

    assert response.text == "[]"
