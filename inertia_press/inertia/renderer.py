"""Page object construction."""

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from inertia_press.inertia.props import filter_props, resolve_props
from inertia_press.inertia.request import InertiaDetails
from inertia_press.inertia.types import PageObject

if TYPE_CHECKING:
    from anyio.from_thread import BlockingPortal

    from inertia_press.config import InertiaConfig
    from inertia_press.inertia.context import InertiaContext

__all__ = ("DEFAULT_VERSION", "PageRenderer")

logger = logging.getLogger("inertia_press.inertia")

DEFAULT_VERSION = "1.0"


class PageRenderer:
    """Build page objects from props, shared props and partial reload headers.

    Args:
        config: The Inertia configuration.
        version_provider: Fallback for the version tag when neither the request
            context nor the configuration sets one, usually the asset manifest hash.
    """

    def __init__(
        self,
        config: "InertiaConfig",
        version_provider: "Callable[[], str] | None" = None,
    ) -> None:
        self.config = config
        self._version_provider = version_provider

    def version(self, context: "InertiaContext | None" = None) -> str:
        if context is not None and context.version:
            return context.version
        if self.config.version:
            return self.config.version
        if self._version_provider is not None:
            return self._version_provider()
        return DEFAULT_VERSION

    def merge_props(self, props: "Mapping[str, Any]", context: "InertiaContext | None" = None) -> "dict[str, Any]":
        """Merge page props with shared props. Shared props win on key collisions."""
        shared = {**self.config.shared_props, **(context.shared_props if context is not None else {})}
        return {**props, **shared}

    def render(
        self,
        component: str,
        props: "Mapping[str, Any] | None" = None,
        *,
        context: "InertiaContext | None" = None,
        headers: "InertiaDetails | Mapping[str, str] | None" = None,
        url: str = "/",
        portal: "BlockingPortal | None" = None,
    ) -> PageObject:
        """Build the page object for ``component``.

        Props are merged with shared props, filtered for partial reloads (lazy
        props are dropped unless requested) and only then resolved, so lazy props
        that were not requested are never invoked.

        Args:
            component: The client component to render.
            props: Props for this page.
            context: The request context carrying shared props and the version tag.
            headers: The request headers, or parsed :class:`InertiaDetails`.
            url: The request URL, path and query string.
            portal: Optional portal for async lazy props.

        Returns:
            The page object. It is also stored on ``context`` when one is given.
        """
        details = headers if isinstance(headers, InertiaDetails) else InertiaDetails(headers or {})
        merged = self.merge_props(props or {}, context)
        partial_keys = details.partial_keys_for(component)
        if partial_keys is not None:
            logger.debug("Partial reload of %r requesting %s", component, sorted(partial_keys))
        page = PageObject(
            component=component,
            url=url,
            version=self.version(context),
            props=resolve_props(filter_props(merged, partial_keys), portal),
        )
        if context is not None:
            context.page = page
        return page
