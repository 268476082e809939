import datetime

from inertia_press.inertia.types import PageObject


def test_page_object_to_dict() -> None:
    page = PageObject(component="Home", url="/", version="1.0", props={"a": 1})

    assert page.to_dict() == {"component": "Home", "url": "/", "version": "1.0", "props": {"a": 1}}


def test_page_object_json_round_trip() -> None:
    page = PageObject(component="Users/Index", url="/users?page=2", version="abc", props={"users": [{"id": 1}]})

    assert PageObject.from_json(page.to_json()) == page


def test_page_object_json_with_serializer() -> None:
    page = PageObject(component="Home", url="/", version="1.0", props={"when": datetime.date(2024, 1, 2)})

    assert '"when":"2024-01-02"' in page.to_json()

    class Money:
        def __init__(self, cents: int) -> None:
            self.cents = cents

    page = PageObject(component="Home", url="/", version="1.0", props={"price": Money(150)})
    assert '"price":150' in page.to_json(serializer=lambda value: value.cents)
