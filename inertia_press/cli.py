from typing import TYPE_CHECKING, Optional

from click import argument, group
from litestar.cli._utils import LitestarGroup  # pyright: ignore[reportPrivateImportUsage]

if TYPE_CHECKING:
    from litestar import Litestar


@group(cls=LitestarGroup, name="assets")
def assets_group() -> None:
    """Inspect Vite asset resolution."""


@assets_group.command(
    name="status",
    help="Check the status of the Vite integration.",
)
def assets_status(app: "Litestar") -> None:
    """Check the status of the Vite integration."""
    from litestar.cli._utils import console  # pyright: ignore[reportPrivateImportUsage]

    from inertia_press.assets import AssetMode
    from inertia_press.exceptions import InertiaPressError
    from inertia_press.inertia.plugin import InertiaPlugin
    from inertia_press.plugin import VitePlugin

    plugin = app.plugins.get(VitePlugin)
    config = plugin.config
    resolver = plugin.resolver
    mode = resolver.probe_mode()

    console.rule("[yellow]Vite Integration Status[/]", align="left")
    console.print(f"Mode: {mode.value}")
    console.print(f"Entry point: {config.input or '-'}")
    console.print(f"Assets URL: {config.asset_url}")
    console.print(f"Debug: {config.is_debug}")

    if mode is AssetMode.HOT:
        try:
            url = resolver.read_hot_url()
        except InertiaPressError as e:
            console.print(f"✗ {e!s}", style="red", markup=False)
        else:
            _probe(url, "Vite server")
    else:
        manifest_path = config.manifest_path
        if manifest_path.is_file():
            console.print(f"[green]✓ Manifest found at {manifest_path}[/]")
            console.print(f"Version: {resolver.version_id()}")
        else:
            console.print(f"[red]✗ Manifest not found at {manifest_path}[/]")
        ssr_path = config.ssr_output_path
        if ssr_path.is_dir():
            console.print(f"SSR bundle: {ssr_path}", soft_wrap=True)
        else:
            console.print(f"SSR bundle: not built ({ssr_path})", soft_wrap=True)

    try:
        inertia_plugin: "InertiaPlugin" = app.plugins.get(InertiaPlugin)
    except KeyError:
        return
    if (ssr_url := inertia_plugin.config.ssr_endpoint) is not None:
        _probe(ssr_url, "SSR server")


def _probe(url: str, name: str) -> None:
    import httpx
    from litestar.cli._utils import console  # pyright: ignore[reportPrivateImportUsage]

    try:
        response = httpx.get(url, timeout=0.5)
        if response.status_code < 500:
            console.print(f"[green]✓ {name} running at {url}[/]")
        else:
            console.print(f"[yellow]! {name} reachable at {url} but returned {response.status_code}[/]")
    except httpx.HTTPError as e:
        console.print(f"[red]✗ {name} not reachable at {url}: {e!s}[/]")


@assets_group.command(
    name="resolve",
    help="Print the tags emitted for an entry point.",
)
@argument("entry", required=False, default=None)
def assets_resolve(app: "Litestar", entry: "Optional[str]") -> None:
    """Print the tags emitted for an entry point."""
    from litestar.cli._utils import LitestarCLIException, console  # pyright: ignore[reportPrivateImportUsage]

    from inertia_press.exceptions import InertiaPressError
    from inertia_press.plugin import VitePlugin

    resolver = app.plugins.get(VitePlugin).resolver
    try:
        plan = resolver.prepare(entry)
    except InertiaPressError as e:
        raise LitestarCLIException(str(e)) from e
    if plan is None:
        console.print("[yellow]Nothing to emit. Enable debug mode to see why.[/]")
        return
    console.print(f"Mode: {plan.mode.value}")
    for url in plan.style_urls:
        console.print(f"style: {url}")
    for url in plan.script_urls:
        console.print(f"script: {url}")
    console.print(str(resolver.emit(plan)), markup=False, highlight=False, soft_wrap=True)
