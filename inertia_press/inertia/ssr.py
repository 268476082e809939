"""Inertia SSR sidecar client.

The official Inertia SSR server listens on ``/render`` and expects the raw
page object as JSON. It answers with JSON holding a ``body`` string and an
optional ``head`` list. Any failure falls back to client-side rendering.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

import httpx

if TYPE_CHECKING:
    from inertia_press.inertia.types import PageObject

__all__ = ("SSRResult", "parse_ssr_payload", "render_ssr")

logger = logging.getLogger("inertia_press.ssr")


@dataclass(frozen=True)
class SSRResult:
    body: str
    head: "list[str]" = field(default_factory=list)


def parse_ssr_payload(payload: Any) -> "SSRResult | None":
    """Validate an SSR response payload.

    Returns:
        The result, or ``None`` when the payload does not have the expected shape.
    """
    if not isinstance(payload, dict):
        return None
    payload_dict = cast("dict[str, Any]", payload)
    body = payload_dict.get("body")
    if not isinstance(body, str):
        return None
    head: Any = payload_dict.get("head") or []
    if not isinstance(head, list) or any(not isinstance(item, str) for item in cast("list[Any]", head)):
        return None
    return SSRResult(body=body, head=cast("list[str]", head))


def render_ssr(
    page: "PageObject",
    url: str,
    *,
    timeout: float = 10.0,
    client: "httpx.Client | None" = None,
) -> "SSRResult | None":
    """POST the page object to the SSR sidecar.

    Args:
        page: The page object.
        url: The render endpoint.
        timeout: Request timeout in seconds.
        client: Optional client, mainly for tests and connection reuse.

    Returns:
        The rendered head and body, or ``None`` when the sidecar is unavailable or misbehaves.
    """
    content = page.to_json().encode("utf-8")
    headers = {"content-type": "application/json"}
    try:
        if client is not None:
            response = client.post(url, content=content, headers=headers, timeout=timeout)
        else:
            response = httpx.post(url, content=content, headers=headers, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as exc:
        logger.debug("SSR server at %s unavailable, falling back to client rendering: %s", url, exc)
        return None
    except ValueError:
        logger.debug("SSR server at %s returned invalid JSON, falling back to client rendering", url)
        return None
    result = parse_ssr_payload(payload)
    if result is None:
        logger.debug("SSR server at %s returned an unexpected payload, falling back to client rendering", url)
    return result
