from typing import Any

import pytest

from inertia_press.inertia.props import Deferred, Value, filter_props, is_deferred, lazy, resolve_props


class Counter:
    def __init__(self, value: Any) -> None:
        self.calls = 0
        self.value = value

    def __call__(self) -> Any:
        self.calls += 1
        return self.value


def test_lazy_builds_deferred() -> None:
    prop = lazy(lambda: 1)

    assert isinstance(prop, Deferred)
    assert is_deferred(prop)
    assert not is_deferred(Value(1))


def test_deferred_requires_callable() -> None:
    with pytest.raises(TypeError):
        Deferred("not callable")  # type: ignore[arg-type]


def test_deferred_invokes_callback_on_every_resolve() -> None:
    counter = Counter("users")
    prop = lazy(counter)

    assert prop.resolve() == "users"
    assert prop.resolve() == "users"
    assert counter.calls == 2


def test_async_deferred_without_portal() -> None:
    async def load() -> "list[str]":
        return ["a", "b"]

    assert lazy(load).resolve() == ["a", "b"]


def test_value_wrapper() -> None:
    assert Value({"a": 1}).resolve() == {"a": 1}


def test_filter_drops_deferred_at_any_depth() -> None:
    props = {
        "title": "Home",
        "users": lazy(lambda: []),
        "nested": {"a": 1, "b": lazy(lambda: 2), "deeper": {"c": lazy(lambda: 3)}},
    }

    assert filter_props(props) == {"title": "Home", "nested": {"a": 1, "deeper": {}}}


def test_filter_drops_deferred_inside_sequences() -> None:
    counter = Counter(1)
    props = {"items": [lazy(counter), {"a": lazy(counter), "b": 2}, 3], "pair": (lazy(counter), "x")}

    assert filter_props(props) == {"items": [{"b": 2}, 3], "pair": ("x",)}
    assert counter.calls == 0


def test_filter_partial_keeps_exactly_requested_keys() -> None:
    users = lazy(lambda: ["ann"])
    props = {"title": "Home", "users": users, "stats": {"count": 1}}

    filtered = filter_props(props, {"users", "stats", "missing"})

    assert filtered == {"users": users, "stats": {"count": 1}}


def test_filter_empty_partial_set_is_not_partial() -> None:
    assert filter_props({"a": 1, "b": lazy(lambda: 2)}, set()) == {"a": 1}


def test_resolve_walks_containers() -> None:
    props = {
        "value": Value(1),
        "callable": lambda: {"inner": lazy(lambda: "x")},
        "items": [lambda: 1, Value(2), (3, lambda: 4)],
        "text": "plain",
    }

    assert resolve_props(props) == {
        "value": 1,
        "callable": {"inner": "x"},
        "items": [1, 2, (3, 4)],
        "text": "plain",
    }


def test_resolve_leaves_callables_with_arguments() -> None:
    def needs_argument(value: int) -> int:
        return value

    assert resolve_props({"fn": needs_argument})["fn"] is needs_argument
    assert resolve_props({"cls": dict})["cls"] is dict


def test_resolve_does_not_invoke_filtered_lazies() -> None:
    counter = Counter("heavy")
    props = {"title": "Home", "heavy": lazy(counter)}

    assert resolve_props(filter_props(props)) == {"title": "Home"}
    assert counter.calls == 0

    assert resolve_props(filter_props(props, {"heavy"})) == {"heavy": "heavy"}
    assert counter.calls == 1
