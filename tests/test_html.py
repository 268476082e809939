import html

import pytest

from inertia_press.html import HtmlTag, as_module, inline_script_tag, root_element, script_tag, style_tag


def test_script_tag_is_module_typed() -> None:
    assert str(script_tag("/build/app.js")) == '<script type="module" src="/build/app.js"></script>'


@pytest.mark.parametrize("existing", ["text/javascript", "application/javascript", ""])
def test_as_module_replaces_existing_type(existing: str) -> None:
    tag = HtmlTag("script", {"type": existing, "src": "/app.js"})

    rendered = str(as_module(tag))

    assert rendered.count("type=") == 1
    assert 'type="module"' in rendered


def test_as_module_replaces_type_regardless_of_case() -> None:
    tag = HtmlTag("script", {"TYPE": "text/javascript", "src": "/app.js"})

    assert str(as_module(tag)) == '<script type="module" src="/app.js"></script>'


def test_as_module_rejects_other_elements() -> None:
    with pytest.raises(ValueError):
        as_module(HtmlTag("link", {"href": "/app.css"}))


def test_classic_script_keeps_its_type() -> None:
    tag = script_tag("/legacy.js", {"type": "text/javascript"}, module=False)

    assert str(tag) == '<script type="text/javascript" src="/legacy.js"></script>'


def test_style_tag() -> None:
    assert str(style_tag("/build/app.css", {"id": "app-css"})) == (
        '<link rel="stylesheet" id="app-css" href="/build/app.css" />'
    )


def test_boolean_and_empty_attributes() -> None:
    tag = HtmlTag("script", {"src": "/a.js", "defer": True, "async": False, "nonce": None})

    assert str(tag) == '<script src="/a.js" defer></script>'


def test_inline_script_content_is_verbatim() -> None:
    tag = inline_script_tag("window.x = 1 < 2", {"id": "x-js-after"})

    assert str(tag) == '<script type="module" id="x-js-after">window.x = 1 < 2</script>'


def test_attribute_values_are_escaped() -> None:
    tag = HtmlTag("link", {"href": '/a.css?x="><script>'})

    assert "<script>" not in str(tag)
    assert "&#34;" in str(tag)


def test_root_element_escapes_page_json() -> None:
    page_json = '{"component":"Home","props":{"title":"<b>Tom & Jerry</b>"}}'

    rendered = str(root_element("app", page_json))

    assert rendered.startswith('<div id="app" data-page="')
    assert "<b>" not in rendered
    data_page = rendered.split('data-page="', 1)[1].rsplit('"></div>', 1)[0]
    assert html.unescape(data_page) == page_json


def test_tag_helpers() -> None:
    tag = HtmlTag("script", {"src": "/a.js", "id": "a"})

    assert tag.with_attrs(id="b").attrs["id"] == "b"
    assert "id" not in tag.without_attrs("id").attrs
    assert tag.__html__() == str(tag.render())
