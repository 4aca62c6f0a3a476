from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from msgraphsync.users.mapper import first_value, normalize
from msgraphsync.users.models import (
    JsonList,
    JsonMap,
    JsonNull,
    JsonScalar,
    to_json_value,
)

keys = st.text(st.characters(exclude_characters="/"), min_size=1, max_size=12)
scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.text(max_size=20),
)
leaves = st.one_of(scalars, st.lists(st.one_of(st.integers(), st.text(max_size=8)), max_size=3))
records = st.dictionaries(
    keys,
    st.one_of(leaves, st.dictionaries(keys, leaves, max_size=4)),
    max_size=8,
)


def test_nested_field__flattened_with_slash() -> None:
    assert normalize({"a": {"b": "x"}}) == {"a/b": "x"}


def test_nested_null__becomes_empty_collection() -> None:
    assert normalize({"a": {"b": None}}) == {"a/b": []}


def test_top_level_null__becomes_empty_collection() -> None:
    assert normalize({"givenName": None}) == {"givenName": []}


def test_arrays__preserved() -> None:
    assert normalize({"businessPhones": []}) == {"businessPhones": []}
    assert normalize({"businessPhones": ["123", "456"]}) == {
        "businessPhones": ["123", "456"]
    }


def test_graph_user__shape() -> None:
    user = {
        "id": "87d349ed-44d7-43e1-9a83-5f2406dee5bd",
        "mail": "AdeleV@contoso.com",
        "accountEnabled": True,
        "businessPhones": ["+1 425 555 0109"],
        "mobilePhone": None,
        "onPremisesExtensionAttributes": {
            "extensionAttribute1": "toto",
            "extensionAttribute2": None,
        },
    }

    assert normalize(user) == {
        "id": "87d349ed-44d7-43e1-9a83-5f2406dee5bd",
        "mail": "AdeleV@contoso.com",
        "accountEnabled": True,
        "businessPhones": ["+1 425 555 0109"],
        "mobilePhone": [],
        "onPremisesExtensionAttributes/extensionAttribute1": "toto",
        "onPremisesExtensionAttributes/extensionAttribute2": [],
    }


def test_deeper_nesting__keeps_flattening() -> None:
    assert normalize({"a": {"b": {"c": 1}}}) == {"a/b/c": 1}


def test_key_order__follows_record() -> None:
    assert list(normalize({"z": 1, "a": {"y": 2, "b": 3}, "m": None})) == [
        "z",
        "a/y",
        "a/b",
        "m",
    ]


@given(records)
def test_normalize__idempotent(record: dict) -> None:
    once = normalize(record)
    assert normalize(once) == once


@given(records)
def test_normalize__never_yields_none(record: dict) -> None:
    assert all(value is not None for value in normalize(record).values())


def test_to_json_value__variants() -> None:
    assert to_json_value(None) == JsonNull()
    assert to_json_value("x") == JsonScalar("x")
    assert to_json_value([1, None]) == JsonList((JsonScalar(1), JsonNull()))
    assert to_json_value({"a": {"b": 1}}) == JsonMap(
        (("a", JsonMap((("b", JsonScalar(1)),))),)
    )
    assert to_json_value({"a": [1], "b": None}).to_python() == {"a": [1], "b": None}


def test_to_json_value__rejects_non_json() -> None:
    with pytest.raises(TypeError, match="Unsupported JSON value"):
        to_json_value(object())


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (["a", "b"], "a"),
        ([], None),
        (None, None),
        ("x", "x"),
        ({"only"}, "only"),
    ],
)
def test_first_value(value, expected) -> None:
    assert first_value(value) == expected
