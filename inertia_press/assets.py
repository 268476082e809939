"""Vite asset resolution.

This module decides, on every call, whether a Vite dev server is running
(hot mode) or a production build exists (build mode), and turns a logical
entry point into the ordered script and stylesheet handles a page has to
load.

Key features:
- Hot file probing, re-evaluated on every call
- Manifest parsing for production asset resolution, never cached
- React Fast Refresh preamble for development
- Two-phase ``prepare`` / ``emit`` interface for templates
"""

import hashlib
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from textwrap import dedent
from typing import TYPE_CHECKING, Any, Literal, cast
from urllib.parse import urljoin

import markupsafe
from litestar.exceptions import SerializationException
from litestar.serialization import decode_json

from inertia_press.exceptions import (
    AssetNotFoundError,
    InertiaPressError,
    ManifestNotFoundError,
    MissingEntryPointError,
)
from inertia_press.html import HtmlTag, inline_script_tag, script_tag, style_tag

if TYPE_CHECKING:
    from inertia_press.config import ViteConfig

__all__ = (
    "VITE_CLIENT_HANDLE",
    "AssetHandle",
    "AssetMode",
    "AssetPlan",
    "AssetRegistry",
    "AssetResolver",
    "ManifestEntry",
)

logger = logging.getLogger("inertia_press")

VITE_CLIENT_HANDLE = "vite-client"

REACT_REFRESH_PREAMBLE = dedent("""\
    import RefreshRuntime from '{url}'
    RefreshRuntime.injectIntoGlobalHook(window)
    window.$RefreshReg$ = () => {{}}
    window.$RefreshSig$ = () => (type) => type
    window.__vite_plugin_react_preamble_installed__ = true
    """)


class AssetMode(str, Enum):
    """How assets are served for the current call."""

    HOT = "hot"
    BUILD = "build"


@dataclass(frozen=True)
class ManifestEntry:
    """One entry point of a Vite manifest."""

    entry_path: str
    output_file: str
    css_files: "tuple[str, ...]" = ()

    @classmethod
    def from_manifest(cls, manifest: "dict[str, Any]", entry_path: str) -> "ManifestEntry | None":
        """Look up ``entry_path`` in a parsed manifest.

        Args:
            manifest: The parsed manifest.
            entry_path: The entry point key.

        Returns:
            The entry, or ``None`` when the manifest has no usable record for it.
        """
        item = manifest.get(entry_path)
        if not isinstance(item, dict) or not item.get("file"):
            return None
        item = cast("dict[str, Any]", item)
        return cls(
            entry_path=entry_path,
            output_file=str(item["file"]),
            css_files=tuple(str(css) for css in item.get("css") or ()),
        )


@dataclass(frozen=True)
class AssetHandle:
    """A registered script or stylesheet."""

    handle: str
    src: str
    kind: "Literal['script', 'style']" = "script"
    module: bool = True
    inline: "tuple[str, ...]" = ()
    """Inline code emitted right after the script."""

    def to_tags(self) -> "list[HtmlTag]":
        if self.kind == "style":
            return [style_tag(self.src, {"id": f"{self.handle}-css"})]
        tags = [script_tag(self.src, {"id": f"{self.handle}-js"}, module=self.module)]
        tags.extend(
            inline_script_tag(code, {"id": f"{self.handle}-js-after"}, module=self.module) for code in self.inline
        )
        return tags


@dataclass(frozen=True)
class AssetPlan:
    """The ordered handles prepared for one page."""

    mode: AssetMode
    scripts: "tuple[AssetHandle, ...]" = ()
    styles: "tuple[AssetHandle, ...]" = ()

    @property
    def script_urls(self) -> "list[str]":
        return [h.src for h in self.scripts]

    @property
    def style_urls(self) -> "list[str]":
        return [h.src for h in self.styles]

    def __iter__(self) -> "Iterator[AssetHandle]":
        yield from self.styles
        yield from self.scripts


class AssetRegistry:
    """Per-page registry of asset handles.

    Registering a handle twice fails without replacing the first registration.
    """

    def __init__(self) -> None:
        self._scripts: "dict[str, AssetHandle]" = {}
        self._styles: "dict[str, AssetHandle]" = {}

    def register_script(self, handle: str, src: str, *, module: bool = True) -> bool:
        if handle in self._scripts:
            logger.debug("Script handle %r is already registered", handle)
            return False
        self._scripts[handle] = AssetHandle(handle=handle, src=src, kind="script", module=module)
        return True

    def register_style(self, handle: str, href: str) -> bool:
        if handle in self._styles:
            logger.debug("Style handle %r is already registered", handle)
            return False
        self._styles[handle] = AssetHandle(handle=handle, src=href, kind="style", module=False)
        return True

    def add_inline_script(self, handle: str, code: str) -> bool:
        """Attach inline code after a registered script.

        Returns:
            False if ``handle`` is not registered.
        """
        script = self._scripts.get(handle)
        if script is None:
            return False
        self._scripts[handle] = replace(script, inline=(*script.inline, code))
        return True

    def script(self, handle: str) -> AssetHandle:
        return self._scripts[handle]

    def style(self, handle: str) -> AssetHandle:
        return self._styles[handle]

    def __contains__(self, handle: object) -> bool:
        return handle in self._scripts or handle in self._styles


@dataclass
class _ResolveState:
    registry: AssetRegistry
    manifest: "dict[str, Any]" = field(default_factory=dict)


class AssetResolver:
    """Resolve Vite entry points into asset handles.

    The resolver is created per app and holds no per-request state: the hot
    file is probed and the manifest is read again on every call.

    Example:
        resolver = AssetResolver(ViteConfig(input="src/main.jsx"))
        plan = resolver.prepare()
        html = resolver.emit(plan)
    """

    def __init__(self, config: "ViteConfig") -> None:
        self._config = config

    @property
    def config(self) -> "ViteConfig":
        return self._config

    def probe_mode(self) -> AssetMode:
        """Return :attr:`AssetMode.HOT` when the hot file exists, else :attr:`AssetMode.BUILD`."""
        return AssetMode.HOT if self._config.hot_file_path.is_file() else AssetMode.BUILD

    def read_hot_url(self) -> str:
        """Read the dev server URL from the hot file.

        Raises:
            InertiaPressError: If the hot file cannot be read or is empty.

        Returns:
            The dev server URL without a trailing slash.
        """
        hot_file = self._config.hot_file_path
        try:
            url = hot_file.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"[Vite] Failed to read hot file {str(hot_file)!r}."
            raise InertiaPressError(msg) from exc
        if not url:
            msg = f"[Vite] Hot file {str(hot_file)!r} is empty."
            raise InertiaPressError(msg)
        return url.rstrip("/")

    def load_manifest(self) -> "dict[str, Any]":
        """Read and parse the Vite manifest.

        Raises:
            ManifestNotFoundError: If the manifest is missing, unreadable or not a JSON object.

        Returns:
            The parsed manifest, passed through ``ViteConfig.manifest_hook`` when set.
        """
        manifest_path = self._config.manifest_path
        if not manifest_path.is_file():
            raise ManifestNotFoundError(str(manifest_path))
        try:
            manifest = decode_json(manifest_path.read_bytes())
        except OSError as exc:
            raise ManifestNotFoundError(str(manifest_path), "failed to read manifest") from exc
        except SerializationException as exc:
            raise ManifestNotFoundError(str(manifest_path), "manifest contains invalid data") from exc
        if not isinstance(manifest, dict):
            raise ManifestNotFoundError(str(manifest_path), "manifest contains invalid data")
        manifest = cast("dict[str, Any]", manifest)
        if self._config.manifest_hook is not None:
            manifest = self._config.manifest_hook(manifest)
        return manifest

    def hot_asset(self, base_url: str, path: str) -> str:
        return f"{base_url}/{path.strip().lstrip('/')}"

    def build_asset(self, path: str) -> str:
        return urljoin(self._config.asset_url or "/", path.lstrip("/"))

    def resolve(self, entry: "str | None", registry: "AssetRegistry | None" = None) -> "AssetPlan | None":
        """Resolve an entry point into an asset plan.

        Configuration errors (missing manifest, missing entry) raise in debug
        mode and are logged and degrade to ``None`` otherwise.

        Args:
            entry: The entry point as written in the manifest.
            registry: Registry to register handles with. A fresh one is used when omitted.

        Returns:
            The plan, or ``None`` when there is nothing to emit.
        """
        state = _ResolveState(registry=registry if registry is not None else AssetRegistry())
        try:
            if not entry:
                raise MissingEntryPointError
            mode = self.probe_mode()
            logger.debug("Resolving %r in %s mode", entry, mode.value)
            if mode is AssetMode.HOT:
                plan = self._resolve_hot(entry, state)
            else:
                state.manifest = self.load_manifest()
                plan = self._resolve_build(entry, state)
        except InertiaPressError as exc:
            return self._fail(exc)
        if plan is not None and self._config.assets_hook is not None:
            plan = self._config.assets_hook(plan, state.manifest, self._config)
        return plan

    def prepare(self, entry: "str | None" = None, registry: "AssetRegistry | None" = None) -> "AssetPlan | None":
        """Compute the asset plan for a page.

        Args:
            entry: Entry point to resolve. Defaults to ``ViteConfig.input``.
            registry: Optional registry shared by several ``prepare`` calls on one page.

        Returns:
            The plan, or ``None`` when there is nothing to emit.
        """
        return self.resolve(entry or self._config.input, registry)

    @staticmethod
    def emit(plan: "AssetPlan | None") -> markupsafe.Markup:
        """Render a plan into link and script tags, stylesheets first."""
        if plan is None:
            return markupsafe.Markup("")
        return markupsafe.Markup("\n".join(str(tag.render()) for handle in plan for tag in handle.to_tags()))

    def version_id(self) -> str:
        """Return a version tag for the current build.

        Returns:
            The sha256 of the manifest in build mode, ``"1.0"`` in hot mode or without a manifest.
        """
        if self.probe_mode() is AssetMode.HOT:
            return "1.0"
        try:
            return hashlib.sha256(self._config.manifest_path.read_bytes()).hexdigest()
        except OSError:
            return "1.0"

    def _resolve_hot(self, entry: str, state: _ResolveState) -> "AssetPlan | None":
        base_url = self.read_hot_url()
        registry = state.registry
        scripts: "list[str]" = []
        if registry.register_script(VITE_CLIENT_HANDLE, self.hot_asset(base_url, "@vite/client")):
            scripts.append(VITE_CLIENT_HANDLE)
            if self._config.react_refresh:
                preamble = REACT_REFRESH_PREAMBLE.format(url=self.hot_asset(base_url, "@react-refresh"))
                registry.add_inline_script(VITE_CLIENT_HANDLE, preamble)
        if not registry.register_script(self._config.handle, self.hot_asset(base_url, entry)):
            return None
        scripts.append(self._config.handle)
        return AssetPlan(mode=AssetMode.HOT, scripts=tuple(registry.script(h) for h in scripts))

    def _resolve_build(self, entry: str, state: _ResolveState) -> "AssetPlan | None":
        item = ManifestEntry.from_manifest(state.manifest, entry)
        if item is None:
            raise AssetNotFoundError(entry, str(self._config.manifest_path))
        registry = state.registry
        handle = self._config.handle
        scripts: "list[AssetHandle]" = []
        styles: "list[AssetHandle]" = []
        if registry.register_script(handle, self.build_asset(item.output_file)):
            scripts.append(registry.script(handle))
        for index, css_file in enumerate(item.css_files):
            style_handle = f"{handle}-{index}"
            if registry.register_style(style_handle, self.build_asset(css_file)):
                styles.append(registry.style(style_handle))
        return AssetPlan(mode=AssetMode.BUILD, scripts=tuple(scripts), styles=tuple(styles))

    def _fail(self, exc: InertiaPressError) -> None:
        if self._config.is_debug:
            raise exc
        logger.warning("%s", exc)

    def describe(self) -> "dict[str, Any]":
        """Summarise the current resolution state, for diagnostics."""
        mode = self.probe_mode()
        info: "dict[str, Any]" = {"mode": mode.value, "input": self._config.input}
        if mode is AssetMode.HOT:
            info["hot_file"] = str(self._config.hot_file_path)
        else:
            manifest_path: Path = self._config.manifest_path
            info["manifest"] = str(manifest_path)
            info["manifest_found"] = manifest_path.is_file()
        info["ssr_bundle_found"] = self._config.ssr_output_path.is_dir()
        return info
