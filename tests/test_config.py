from pathlib import Path

import pytest

from inertia_press.config import DEFAULT_SSR_URL, InertiaConfig, ViteConfig


def test_default_config(tmp_path: Path) -> None:
    config = ViteConfig(root_dir=tmp_path)

    assert config.input is None
    assert config.public_dir == Path("public")
    assert config.build_dir == Path("build")
    assert config.hot_file == Path("public/hot")
    assert config.ssr_output_dir == Path("public/build/ssr")
    assert config.handle == "inertia-press"
    assert config.react_refresh is True
    assert config.asset_url == "/build/"
    assert config.debug is None
    assert config.is_debug is False
    assert config.hot_file_path == tmp_path / "public" / "hot"
    assert config.build_path == tmp_path / "public" / "build"
    assert config.ssr_output_path == tmp_path / "public" / "build" / "ssr"


def test_root_dir_defaults_to_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert ViteConfig().root_dir == tmp_path


def test_environment_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ASSET_URL", "https://cdn.example.com/build")
    monkeypatch.setenv("LITESTAR_DEBUG", "true")
    monkeypatch.setenv("VITE_REACT_REFRESH", "false")

    config = ViteConfig()

    assert config.asset_url == "https://cdn.example.com/build/"
    assert config.debug is True
    assert config.react_refresh is False


def test_from_options_accepts_camel_case(tmp_path: Path) -> None:
    config = ViteConfig.from_options(
        {
            "input": "src/app.tsx",
            "rootDirectory": tmp_path,
            "publicDirectory": "web",
            "buildDirectory": "dist",
            "hotFile": "web/dev-server",
            "reactRefresh": False,
            "handle": "my-theme",
        }
    )

    assert config.input == "src/app.tsx"
    assert config.hot_file_path == tmp_path / "web" / "dev-server"
    assert config.build_path == tmp_path / "web" / "dist"
    assert config.asset_url == "/dist/"
    assert config.react_refresh is False
    assert config.handle == "my-theme"


def test_from_options_rejects_unknown_keys() -> None:
    with pytest.raises(TypeError, match="outDir"):
        ViteConfig.from_options({"outDir": "dist"})


def test_manifest_path_prefers_build_root(tmp_path: Path) -> None:
    config = ViteConfig(root_dir=tmp_path)
    vite_dir = config.build_path / ".vite"
    vite_dir.mkdir(parents=True)

    assert config.manifest_path == config.build_path / "manifest.json"

    (vite_dir / "manifest.json").write_text("{}")
    assert config.manifest_path == vite_dir / "manifest.json"

    (config.build_path / "manifest.json").write_text("{}")
    assert config.manifest_path == config.build_path / "manifest.json"


@pytest.mark.parametrize(
    "ssr_enabled, ssr_url, expected",
    [
        (False, None, None),
        (True, None, DEFAULT_SSR_URL),
        (False, "http://ssr:13714/render", "http://ssr:13714/render"),
    ],
)
def test_ssr_endpoint(ssr_enabled: bool, ssr_url: "str | None", expected: "str | None") -> None:
    assert InertiaConfig(ssr_enabled=ssr_enabled, ssr_url=ssr_url).ssr_endpoint == expected
