"""Configuration for the Vite asset pipeline and the Inertia page protocol.

Both configuration classes are plain dataclasses. String paths are
normalised to :class:`~pathlib.Path` in ``__post_init__`` and a few values
default to environment variables so deployments can flip them without code
changes.
"""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from inertia_press.assets import AssetPlan

__all__ = ("DEFAULT_SSR_URL", "TRUE_VALUES", "InertiaConfig", "ViteConfig")

TRUE_VALUES = {"True", "true", "1", "yes", "Y", "T"}
DEFAULT_SSR_URL = "http://127.0.0.1:13714/render"

# camelCase option names accepted by ``ViteConfig.from_options``
_OPTION_ALIASES: "dict[str, str]" = {
    "publicDirectory": "public_dir",
    "buildDirectory": "build_dir",
    "hotFile": "hot_file",
    "reactRefresh": "react_refresh",
    "ssrOutputDirectory": "ssr_output_dir",
    "rootDirectory": "root_dir",
    "assetUrl": "asset_url",
    "manifestName": "manifest_name",
}


def _env_flag(name: str, default: "bool | None" = None) -> "bool | None":
    value = os.getenv(name)
    if value is None:
        return default
    return value in TRUE_VALUES


@dataclass
class ViteConfig:
    """Configuration for Vite asset resolution.

    Pass an instance to :class:`VitePlugin <inertia_press.plugin.VitePlugin>`.
    """

    input: "str | None" = None
    """The entry point to resolve, as written in the Vite manifest (e.g. ``src/main.jsx``)."""
    root_dir: "Path | str | None" = None
    """Base directory that ``public_dir``, ``hot_file`` and ``ssr_output_dir`` are relative to.

    Defaults to the current working directory.
    """
    public_dir: "Path | str" = field(default="public")
    """The public directory, relative to ``root_dir``."""
    build_dir: "Path | str" = field(default="build")
    """The build output directory, relative to ``public_dir``. The manifest is found here."""
    hot_file: "Path | str | None" = None
    """Location of the hot file, relative to ``root_dir``. Defaults to ``<public_dir>/hot``.

    The file contains a single line holding the protocol, host and port the Vite dev server runs on.
    """
    manifest_name: str = "manifest.json"
    """Name of the manifest file."""
    handle: str = "inertia-press"
    """Handle the entry script is registered under. Stylesheets use ``<handle>-<index>``."""
    react_refresh: bool = field(default_factory=lambda: bool(_env_flag("VITE_REACT_REFRESH", default=True)))
    """Inject the React Fast Refresh preamble in hot mode."""
    ssr_output_dir: "Path | str | None" = None
    """SSR bundle output, relative to ``root_dir``. Defaults to ``<public_dir>/<build_dir>/ssr``."""
    asset_url: "str | None" = field(default_factory=lambda: os.getenv("ASSET_URL"))
    """Base URL prepended to built asset files. Defaults to ``/<build_dir>/``."""
    debug: "bool | None" = field(default_factory=lambda: _env_flag("LITESTAR_DEBUG"))
    """Fail loudly on manifest errors. When unset, the application's ``debug`` flag is used."""
    set_static_folders: bool = True
    """Serve the build directory at ``asset_url``."""
    manifest_hook: "Callable[[dict[str, Any]], dict[str, Any]] | None" = None
    """Optional callable applied to the parsed manifest before lookups."""
    assets_hook: "Callable[[AssetPlan, dict[str, Any], ViteConfig], AssetPlan | None] | None" = None
    """Optional callable applied to every prepared asset plan."""

    def __post_init__(self) -> None:
        """Normalise paths and fill derived defaults."""
        self.root_dir = Path.cwd() if self.root_dir is None else Path(self.root_dir)
        if isinstance(self.public_dir, str):
            self.public_dir = Path(self.public_dir)
        if isinstance(self.build_dir, str):
            self.build_dir = Path(self.build_dir)
        self.hot_file = Path(self.public_dir) / "hot" if self.hot_file is None else Path(self.hot_file)
        if self.ssr_output_dir is None:
            self.ssr_output_dir = Path(self.public_dir) / self.build_dir / "ssr"
        elif isinstance(self.ssr_output_dir, str):
            self.ssr_output_dir = Path(self.ssr_output_dir)
        if not self.asset_url:
            self.asset_url = f"/{Path(self.build_dir).as_posix().strip('/')}/"
        elif not self.asset_url.endswith("/"):
            self.asset_url = f"{self.asset_url}/"

    @classmethod
    def from_options(cls, options: "Mapping[str, Any]") -> "ViteConfig":
        """Build a config from a flat options mapping.

        Both snake_case field names and the camelCase names used by Vite plugin
        options (``publicDirectory``, ``buildDirectory``, ``hotFile`` ...) are accepted.

        Args:
            options: The options mapping.

        Raises:
            TypeError: If an option is not recognised.

        Returns:
            The configuration.
        """
        known = {f.name for f in fields(cls)}
        kwargs: "dict[str, Any]" = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                msg = f"Unknown Vite option {key!r}."
                raise TypeError(msg)
            kwargs[name] = value
        return cls(**kwargs)

    @property
    def hot_file_path(self) -> Path:
        """Absolute location of the hot file."""
        return Path(self.root_dir or ".") / Path(self.hot_file or "hot")

    @property
    def build_path(self) -> Path:
        """Absolute location of the build directory."""
        return Path(self.root_dir or ".") / self.public_dir / self.build_dir

    @property
    def ssr_output_path(self) -> Path:
        """Absolute location of the SSR bundle output."""
        return Path(self.root_dir or ".") / Path(self.ssr_output_dir or "ssr")

    @property
    def manifest_candidates(self) -> "tuple[Path, ...]":
        """Locations the manifest is looked up at, in order.

        Vite 5 and later write the manifest into a ``.vite`` sub directory.
        """
        return (self.build_path / self.manifest_name, self.build_path / ".vite" / self.manifest_name)

    @property
    def manifest_path(self) -> Path:
        """The first manifest candidate that exists, else the primary location."""
        for candidate in self.manifest_candidates:
            if candidate.is_file():
                return candidate
        return self.manifest_candidates[0]

    @property
    def is_debug(self) -> bool:
        return bool(self.debug)


@dataclass
class InertiaConfig:
    """Configuration for InertiaJS support."""

    root_template: str = "index.html"
    """Name of the root template to use.

    This must be a path that is found by the application's template config.
    """
    component_opt_keys: "tuple[str, ...]" = ("component", "page")
    """Identifiers used on route handlers to name the Inertia component to render."""
    root_id: str = "app"
    """The ``id`` of the element the client application mounts on."""
    version: "str | None" = None
    """A fixed asset version. When unset, the hash of the Vite manifest is used."""
    shared_props: "dict[str, Any]" = field(default_factory=dict)
    """Props added to every page. Props shared during a request take precedence."""
    ssr_enabled: bool = False
    """Render pages through the SSR sidecar."""
    ssr_url: "str | None" = None
    """URL of the SSR sidecar render endpoint. Setting it enables SSR."""
    ssr_timeout: float = 10.0
    """Seconds to wait on the SSR sidecar before falling back to client rendering."""

    @property
    def ssr_endpoint(self) -> "str | None":
        """Return the SSR render endpoint, or ``None`` when SSR is disabled."""
        if self.ssr_url:
            return self.ssr_url
        return DEFAULT_SSR_URL if self.ssr_enabled else None
