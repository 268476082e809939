from collections.abc import Generator
from pathlib import Path

import pytest
from litestar.contrib.jinja import JinjaTemplateEngine
from litestar.template.config import TemplateConfig

from inertia_press.config import InertiaConfig, ViteConfig
from inertia_press.inertia.plugin import InertiaPlugin
from inertia_press.plugin import VitePlugin

here = Path(__file__).parent


# Environment variables that may affect test behavior - clear before each test
_ENV_VARS = [
    "ASSET_URL",
    "LITESTAR_DEBUG",
    "VITE_REACT_REFRESH",
]

MANIFEST = """{
  "src/main.jsx": {
    "file": "assets/main-4f2a9b.js",
    "src": "src/main.jsx",
    "isEntry": true,
    "css": ["assets/main-1c3d.css", "assets/vendor-77aa.css"]
  },
  "src/admin.jsx": {
    "file": "assets/admin-9e8d.js",
    "src": "src/admin.jsx",
    "isEntry": true
  }
}
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear environment variables read by the configuration before each test."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    path = tmp_path / "public" / "build"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def manifest_file(build_dir: Path) -> Path:
    path = build_dir / "manifest.json"
    path.write_text(MANIFEST)
    return path


@pytest.fixture
def hot_file(tmp_path: Path) -> Path:
    path = tmp_path / "public" / "hot"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("http://localhost:5173\n")
    return path


@pytest.fixture
def vite_config(tmp_path: Path) -> Generator[ViteConfig, None, None]:
    yield ViteConfig(input="src/main.jsx", root_dir=tmp_path, debug=False)


@pytest.fixture
def vite_plugin(vite_config: ViteConfig) -> Generator[VitePlugin, None, None]:
    yield VitePlugin(config=vite_config)


@pytest.fixture
def inertia_config() -> Generator[InertiaConfig, None, None]:
    yield InertiaConfig(root_template="index.html.j2")


@pytest.fixture
def inertia_plugin(inertia_config: InertiaConfig) -> Generator[InertiaPlugin, None, None]:
    yield InertiaPlugin(config=inertia_config)


@pytest.fixture
def template_config() -> TemplateConfig[JinjaTemplateEngine]:
    return TemplateConfig(engine=JinjaTemplateEngine(directory=here / "templates"))
