"""Inertia Press: the Inertia.js page protocol and Vite asset resolution for Litestar.

Basic usage:
    from litestar import Litestar, get
    from litestar.contrib.jinja import JinjaTemplateEngine
    from litestar.template.config import TemplateConfig
    from inertia_press import InertiaConfig, InertiaPlugin, ViteConfig, VitePlugin

    @get("/", component="Home")
    async def home() -> dict[str, str]:
        return {"greeting": "Hello"}

    app = Litestar(
        route_handlers=[home],
        plugins=[
            VitePlugin(config=ViteConfig(input="src/main.jsx")),
            InertiaPlugin(config=InertiaConfig(root_template="index.html")),
        ],
        template_config=TemplateConfig(engine=JinjaTemplateEngine, directory="templates"),
    )
"""

from inertia_press import inertia
from inertia_press.assets import AssetMode, AssetPlan, AssetRegistry, AssetResolver
from inertia_press.config import InertiaConfig, ViteConfig
from inertia_press.inertia import InertiaPlugin, PageRenderer, lazy, share
from inertia_press.plugin import VitePlugin

__all__ = (
    "AssetMode",
    "AssetPlan",
    "AssetRegistry",
    "AssetResolver",
    "InertiaConfig",
    "InertiaPlugin",
    "PageRenderer",
    "ViteConfig",
    "VitePlugin",
    "inertia",
    "lazy",
    "share",
)
