"""A small typed HTML tag builder.

Tags are built from explicit attribute mappings and rendered with
:mod:`markupsafe` escaping, so attributes such as ``type`` are set or
replaced structurally instead of by rewriting markup text.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

import markupsafe

__all__ = ("HtmlTag", "as_module", "inline_script_tag", "root_element", "script_tag", "style_tag")

VOID_ELEMENTS = frozenset({"link", "meta", "base", "br", "hr", "img", "input"})


@dataclass(frozen=True)
class HtmlTag:
    """An HTML element with explicit attributes.

    Attribute values of ``True`` render as bare boolean attributes, ``None`` and
    ``False`` values are omitted. ``content`` is inserted verbatim and is meant
    for trusted markup such as inline module scripts.
    """

    name: str
    attrs: "Mapping[str, Any]" = field(default_factory=dict)
    content: str = ""

    def with_attrs(self, **attrs: Any) -> "HtmlTag":
        """Return a copy with the given attributes set, replacing existing values."""
        return replace(self, attrs={**self.attrs, **attrs})

    def without_attrs(self, *names: str) -> "HtmlTag":
        return replace(self, attrs={k: v for k, v in self.attrs.items() if k not in names})

    def render(self) -> markupsafe.Markup:
        parts = [self.name]
        for key, value in self.attrs.items():
            if value is None or value is False:
                continue
            if value is True:
                parts.append(str(markupsafe.escape(key)))
            else:
                parts.append(f'{markupsafe.escape(key)}="{markupsafe.escape(value)}"')
        opening = " ".join(parts)
        if self.name in VOID_ELEMENTS:
            return markupsafe.Markup(f"<{opening} />")
        return markupsafe.Markup(f"<{opening}>{self.content}</{self.name}>")

    def __html__(self) -> str:
        return str(self.render())

    def __str__(self) -> str:
        return str(self.render())


def as_module(tag: HtmlTag) -> HtmlTag:
    """Mark a script tag as an ES module.

    Any existing ``type`` attribute (``text/javascript`` and friends) is
    replaced; a tag without one gains it.

    Args:
        tag: The script tag.

    Raises:
        ValueError: If the tag is not a ``script`` element.

    Returns:
        The module typed tag.
    """
    if tag.name != "script":
        msg = f"Only script tags can be module typed, got <{tag.name}>."
        raise ValueError(msg)
    attrs = {"type": "module", **{k: v for k, v in tag.attrs.items() if k.lower() != "type"}}
    return replace(tag, attrs=attrs)


def script_tag(src: str, attrs: "Mapping[str, Any] | None" = None, *, module: bool = True) -> HtmlTag:
    tag = HtmlTag("script", {**(attrs or {}), "src": src})
    return as_module(tag) if module else tag


def inline_script_tag(code: str, attrs: "Mapping[str, Any] | None" = None, *, module: bool = True) -> HtmlTag:
    tag = HtmlTag("script", dict(attrs or {}), content=code)
    return as_module(tag) if module else tag


def style_tag(href: str, attrs: "Mapping[str, Any] | None" = None) -> HtmlTag:
    return HtmlTag("link", {"rel": "stylesheet", **(attrs or {}), "href": href})


def root_element(element_id: str, page_json: str, *, content: str = "") -> HtmlTag:
    """Build the element the client application mounts on.

    Args:
        element_id: The ``id`` attribute of the element.
        page_json: The serialized page object. It is HTML-entity escaped on render.
        content: Optional server rendered inner HTML.

    Returns:
        The root ``div`` element.
    """
    return HtmlTag("div", {"id": element_id, "data-page": page_json}, content=content)
