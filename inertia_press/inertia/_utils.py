from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from inertia_press.inertia.types import InertiaHeaderType


class InertiaHeaders(str, Enum):
    """Enum for Inertia Headers.

    See: https://inertiajs.com/the-protocol
    """

    ENABLED = "X-Inertia"
    REQUESTED_WITH = "X-Requested-With"
    PARTIAL_DATA = "X-Inertia-Partial-Data"
    PARTIAL_COMPONENT = "X-Inertia-Partial-Component"
    VARY = "Vary"


XML_HTTP_REQUEST = "XMLHttpRequest"


def get_enabled_header(enabled: bool = True) -> "dict[str, Any]":
    """True if inertia is enabled.

    Args:
        enabled: Whether inertia is enabled.

    Returns:
        The headers for inertia.
    """

    return {InertiaHeaders.ENABLED.value: "true" if enabled else "false"}


def get_vary_header(vary: str) -> "dict[str, Any]":
    return {InertiaHeaders.VARY.value: vary}


def get_headers(inertia_headers: "InertiaHeaderType") -> "dict[str, Any]":
    """Return headers for Inertia requests and responses.

    Args:
        inertia_headers: The inertia headers.

    Raises:
        ValueError: If the inertia headers are None.

    Returns:
        The headers for inertia.
    """
    if not inertia_headers:
        msg = "Value for inertia_headers cannot be None."
        raise ValueError(msg)
    inertia_headers_dict: "dict[str, Callable[..., dict[str, Any]]]" = {
        "enabled": get_enabled_header,
        "vary": get_vary_header,
    }

    header: "dict[str, Any]" = {}
    for key, value in inertia_headers.items():
        if value is not None:
            header.update(inertia_headers_dict[key](value))
    return header
