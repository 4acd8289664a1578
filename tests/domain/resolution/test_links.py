from __future__ import annotations

from gpconflict.domain.resolution import normalize_links
from tests.helpers.directory import make_link


def test_normalize_links_drops_disabled_links() -> None:
    links = [make_link("a", 1), make_link("b", 2, enabled=False), make_link("c", 3)]

    result = normalize_links(links)

    assert [link.policy_id for link in result] == ["a", "c"]


def test_normalize_links_orders_by_precedence_rank() -> None:
    links = [make_link("low", 5), make_link("top", 1), make_link("mid", 3)]

    result = normalize_links(links)

    assert [link.precedence_rank for link in result] == [1, 3, 5]


def test_normalize_links_enforced_only_filter() -> None:
    links = [
        make_link("a", 1),
        make_link("b", 2, enforced=True),
        make_link("c", 3, enforced=True, enabled=False),
    ]

    result = normalize_links(links, enforced_only=True)

    assert [link.policy_id for link in result] == ["b"]


def test_normalize_links_keeps_input_order_for_equal_ranks() -> None:
    links = [make_link("second", 2), make_link("first-a", 1), make_link("first-b", 1)]

    result = normalize_links(links)

    assert [link.policy_id for link in result] == ["first-a", "first-b", "second"]


def test_normalize_links_accepts_empty_input() -> None:
    assert normalize_links([]) == ()
    assert normalize_links([], enforced_only=True) == ()
