from __future__ import annotations

import pytest

from sqlpaginate.domain.models import FilterParameter, Operator
from sqlpaginate.parameters import get_parameters, get_request_data, group_parameters

COLUMNS = ["id", "name", "salary"]


@pytest.mark.parametrize(
    "token, operator, value",
    [
        ("salary>=10", Operator.GTE, "10"),
        ("salary<=10", Operator.LTE, "10"),
        ("salary<>10", Operator.NE, "10"),
        ("salary>10", Operator.GT, "10"),
        ("salary<10", Operator.LT, "10"),
        ("salary=10", Operator.EQ, "10"),
    ],
)
def test_operators_are_tried_longest_first(token: str, operator: Operator, value: str) -> None:
    params = get_parameters(COLUMNS, {}, f"http://localhost/employees?{token}")
    assert params == [FilterParameter(name="salary", operator=operator, value=value)]


def test_parameters_follow_column_order_then_sort() -> None:
    url = "http://localhost/employees?sort=-name&salary>4000&name=Ringo"
    params = get_parameters(COLUMNS, {}, url)

    assert [(p.name, p.operator, p.value) for p in params] == [
        ("name", Operator.EQ, "Ringo"),
        ("salary", Operator.GT, "4000"),
        ("sort", Operator.EQ, "-name"),
    ]


def test_no_query_string_yields_no_parameters() -> None:
    assert get_parameters(COLUMNS, {}, "http://localhost/employees") == []
    assert get_parameters(COLUMNS, {}, "") == []


def test_unknown_and_empty_tokens_are_ignored() -> None:
    params = get_parameters(COLUMNS, {}, "?age=3&name=&salary")
    assert params == []


def test_values_are_url_decoded() -> None:
    params = get_parameters(COLUMNS, {}, "?name=Ringo%20Star")
    assert params[0].value == "Ringo Star"


def test_repeated_equality_becomes_in_with_distinct_values() -> None:
    params = get_parameters(COLUMNS, {}, "?name=Ringo&salary=1&name=John&name=Ringo")

    assert params == [
        FilterParameter(name="name", operator=Operator.IN, value="Ringo,John"),
        FilterParameter(name="salary", operator=Operator.EQ, value="1"),
    ]


def test_repeated_inequality_becomes_not_in() -> None:
    params = get_parameters(COLUMNS, {}, "?salary<>4455&salary<>1200000")

    assert params == [
        FilterParameter(name="salary", operator=Operator.NOT_IN, value="4455,1200000"),
    ]
    assert params[0].values() == ["4455", "1200000"]


def test_single_inequality_is_not_promoted() -> None:
    params = get_parameters(COLUMNS, {}, "?salary<>4455")
    assert params == [FilterParameter(name="salary", operator=Operator.NE, value="4455")]


def test_sort_is_never_grouped() -> None:
    params = get_parameters(COLUMNS, {}, "?sort=+name&sort=-id")
    assert [p.value for p in params] == ["+name", "-id"]
    assert all(p.operator is Operator.EQ for p in params)


def test_mapped_parameter_name_is_stored_under_column() -> None:
    params = get_parameters(
        ["programming_language"], {"programming_language": "lg"}, "?lg=Go&programming_language=C"
    )
    assert params == [
        FilterParameter(name="programming_language", operator=Operator.EQ, value="Go")
    ]


def test_group_parameters_keeps_mixed_operators_apart() -> None:
    params = [
        FilterParameter(name="salary", operator=Operator.EQ, value="1"),
        FilterParameter(name="salary", operator=Operator.GT, value="0"),
        FilterParameter(name="salary", operator=Operator.EQ, value="2"),
    ]
    assert group_parameters(params) == [
        FilterParameter(name="salary", operator=Operator.IN, value="1,2"),
        FilterParameter(name="salary", operator=Operator.GT, value="0"),
    ]


@pytest.mark.parametrize(
    "url, page, size",
    [
        ("http://localhost/employees?page=2&page_size=10", 2, 10),
        ("?page=0&page_size=0", 1, 30),
        ("?page=-3&page_size=-1", 1, 30),
        ("?page=abc&page_size=ten", 1, 30),
        ("", 1, 30),
    ],
)
def test_get_request_data(url: str, page: int, size: int) -> None:
    request = get_request_data(url, 30)
    assert request.page_number == page
    assert request.page_size == size
