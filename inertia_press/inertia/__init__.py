from inertia_press.config import InertiaConfig
from inertia_press.inertia.context import InertiaContext, get_context, share
from inertia_press.inertia.plugin import InertiaPlugin
from inertia_press.inertia.props import Deferred, Value, filter_props, is_deferred, lazy, resolve_props
from inertia_press.inertia.renderer import PageRenderer
from inertia_press.inertia.request import InertiaDetails, InertiaHeaders, InertiaRequest, RequestHeaders
from inertia_press.inertia.response import InertiaResponse
from inertia_press.inertia.ssr import SSRResult, render_ssr
from inertia_press.inertia.types import PageObject

__all__ = (
    "Deferred",
    "InertiaConfig",
    "InertiaContext",
    "InertiaDetails",
    "InertiaHeaders",
    "InertiaPlugin",
    "InertiaRequest",
    "InertiaResponse",
    "PageObject",
    "PageRenderer",
    "RequestHeaders",
    "SSRResult",
    "Value",
    "filter_props",
    "get_context",
    "is_deferred",
    "lazy",
    "render_ssr",
    "resolve_props",
    "share",
)
