"""Tests for page and order arithmetic."""

import pytest

from sitegrid.core.exceptions import ConflictError, NotFoundError
from sitegrid.core.models import GridSize, Position
from sitegrid.core.positions import (
    compact_all,
    compact_page,
    group_by_page,
    icons_per_page,
    layout_problems,
    move,
    needs_redistribution,
    next_position,
    redistribute,
    reorder_page,
    sort_by_position,
    total_pages,
)


def names(websites):
    return [w.name for w in websites]


def positions(websites):
    return {w.name: w.position.as_tuple() for w in websites}


class TestTotalPages:
    """Page count is ceil(n / per_page), never below one."""

    @pytest.mark.parametrize(
        "count,per_page,expected",
        [(0, 35, 1), (1, 35, 1), (35, 35, 1), (36, 35, 2), (46, 25, 2), (51, 25, 3)],
    )
    def test_total_pages(self, count, per_page, expected):
        assert total_pages(count, per_page) == expected

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            total_pages(3, 0)

    def test_icons_per_page(self):
        assert icons_per_page("small") == 45
        assert icons_per_page(GridSize.LARGE) == 25


class TestNextPosition:
    def test_empty_collection(self):
        assert next_position([], 35) == Position(page=0, order=0)

    def test_end_of_last_page(self, make_page):
        websites = make_page(3, per_page=5)
        assert next_position(websites, 5) == Position(page=0, order=3)

    def test_new_page_when_last_page_full(self, make_page):
        websites = make_page(5, per_page=5)
        assert next_position(websites, 5) == Position(page=1, order=0)

    def test_uses_last_occupied_page(self, make_website):
        """Additions go after the last page even when earlier pages have room."""
        websites = [
            make_website("A", page=0, order=0),
            make_website("B", page=1, order=0),
        ]
        assert next_position(websites, 5) == Position(page=1, order=1)


class TestCompaction:
    def test_compact_page_closes_gaps(self, make_website):
        websites = [
            make_website("A", page=0, order=0),
            make_website("B", page=0, order=4),
            make_website("C", page=0, order=9),
            make_website("D", page=1, order=3),
        ]

        result = compact_page(websites, 0)

        assert positions(result) == {
            "A": (0, 0),
            "B": (0, 1),
            "C": (0, 2),
            "D": (1, 3),
        }

    def test_compact_all(self, make_website):
        websites = [
            make_website("A", page=0, order=2),
            make_website("B", page=1, order=7),
            make_website("C", page=1, order=5),
        ]

        result = compact_all(websites)

        assert positions(result) == {"A": (0, 0), "C": (1, 0), "B": (1, 1)}

    def test_input_is_not_modified(self, make_website):
        websites = [make_website("A", page=0, order=3)]
        compact_all(websites)
        assert websites[0].order == 3


class TestReorderPage:
    """Reordering requires an exact permutation of the page's ids."""

    def test_reorder(self, make_page):
        websites = make_page(3, per_page=5)
        a, b, c = websites

        result = reorder_page(websites, 0, [c.id, a.id, b.id])

        assert names(sort_by_position(result)) == ["Site 2", "Site 0", "Site 1"]

    def test_missing_id(self, make_page):
        websites = make_page(3, per_page=5)
        a, b, c = websites

        with pytest.raises(ConflictError) as exc_info:
            reorder_page(websites, 0, [a.id, b.id])

        assert exc_info.value.missing == (c.id,)

    def test_extra_and_duplicate_ids(self, make_page):
        websites = make_page(3, per_page=5)
        a, b, c = websites

        with pytest.raises(ConflictError) as exc_info:
            reorder_page(websites, 0, [a.id, a.id, b.id, c.id, "ghost"])

        assert exc_info.value.duplicates == (a.id,)
        assert exc_info.value.extra == ("ghost",)

    def test_ids_from_another_page(self, make_page):
        websites = make_page(4, per_page=2)
        with pytest.raises(ConflictError):
            reorder_page(websites, 0, [websites[0].id, websites[2].id])


class TestMove:
    def test_within_page(self, make_page):
        websites = make_page(4, per_page=5)

        result = move(websites, websites[0].id, 0, 2, per_page=5)

        assert names(sort_by_position(result)) == [
            "Site 1",
            "Site 2",
            "Site 0",
            "Site 3",
        ]

    def test_across_pages(self, make_page):
        """The source page closes its gap and the target page shifts down."""
        websites = make_page(7, per_page=4)

        result = move(websites, websites[1].id, 1, 0, per_page=4)
        pages = group_by_page(result)

        assert names(pages[0]) == ["Site 0", "Site 2", "Site 3"]
        assert names(pages[1]) == ["Site 1", "Site 4", "Site 5", "Site 6"]
        assert not layout_problems(result, 4)

    def test_order_clamped_to_end(self, make_page):
        websites = make_page(3, per_page=5)
        result = move(websites, websites[0].id, 0, 99, per_page=5)
        assert names(sort_by_position(result))[-1] == "Site 0"

    def test_target_page_full(self, make_page):
        websites = make_page(6, per_page=3)
        with pytest.raises(ConflictError):
            move(websites, websites[0].id, 1, 0, per_page=3)

    def test_page_out_of_range(self, make_page):
        websites = make_page(3, per_page=5)
        with pytest.raises(ConflictError):
            move(websites, websites[0].id, 1, 0, per_page=5)

    def test_unknown_website(self, make_page):
        with pytest.raises(NotFoundError):
            move(make_page(2, per_page=5), "ghost", 0, 0, per_page=5)


class TestRedistribute:
    """Redistribution keeps global order and re-chunks pages."""

    def test_shrinking_capacity(self, make_page):
        websites = make_page(46, per_page=45)

        result = redistribute(websites, 25)
        pages = group_by_page(result)

        assert len(pages[0]) == 25
        assert len(pages[1]) == 21
        assert names(sort_by_position(result)) == names(websites)
        assert not layout_problems(result, 25)

    def test_growing_capacity(self, make_page):
        websites = make_page(46, per_page=25)

        result = redistribute(websites, 45)
        pages = group_by_page(result)

        assert len(pages[0]) == 45
        assert len(pages[1]) == 1

    def test_order_follows_page_then_order(self, make_website):
        websites = [
            make_website("late", page=2, order=0),
            make_website("first", page=0, order=0),
            make_website("second", page=0, order=1),
        ]

        result = redistribute(websites, 2)

        assert positions(result) == {
            "first": (0, 0),
            "second": (0, 1),
            "late": (1, 0),
        }


class TestLayoutChecks:
    def test_sparse_pages_need_redistribution(self, make_website):
        """A website on a page beyond ceil(n / per_page) breaks the layout."""
        websites = [
            make_website("A", page=0, order=0),
            make_website("B", page=3, order=0),
        ]

        assert needs_redistribution(websites, 5)
        assert layout_problems(websites, 5)

    def test_consistent_layout(self, make_page):
        websites = make_page(12, per_page=5)
        assert not needs_redistribution(websites, 5)
        assert layout_problems(websites, 5) == []

    def test_overfull_page(self, make_page):
        websites = make_page(10, per_page=10)
        assert needs_redistribution(websites, 5)
