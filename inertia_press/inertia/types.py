"""Inertia protocol types."""

from dataclasses import dataclass, field
from typing import Any, TypedDict, cast

from litestar.serialization import decode_json, encode_json

__all__ = ("InertiaHeaderType", "PageObject")


@dataclass(frozen=True)
class PageObject:
    """One server computed page, as consumed by the Inertia client router.

    Props are expected to be fully resolved: no lazy or callable values remain.
    """

    component: str
    url: str
    version: str
    props: "dict[str, Any]" = field(default_factory=dict)

    def to_dict(self) -> "dict[str, Any]":
        return {"component": self.component, "url": self.url, "version": self.version, "props": self.props}

    def to_json(self, serializer: "Any | None" = None) -> str:
        """Serialize the page object.

        Args:
            serializer: Optional ``enc_hook`` for types the default serializer cannot handle.

        Returns:
            The JSON document.
        """
        return encode_json(self.to_dict(), serializer=serializer).decode("utf-8")

    @classmethod
    def from_json(cls, data: "str | bytes") -> "PageObject":
        payload = cast("dict[str, Any]", decode_json(data))
        return cls(
            component=payload["component"],
            url=payload["url"],
            version=payload["version"],
            props=payload.get("props") or {},
        )


class InertiaHeaderType(TypedDict, total=False):
    """Type for inertia_headers parameter in get_headers()."""

    enabled: "bool | None"
    vary: "str | None"
