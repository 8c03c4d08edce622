"""Page and order arithmetic for websites.

Every function here is pure: it takes a sequence of websites and returns
a new list, leaving the input untouched. The collection store commits the
returned list in a single assignment, so a failure part-way through a
computation never leaves a half-updated layout behind.

Invariants maintained by these helpers:
- Within a page, ``order`` values form the contiguous range ``0..n-1``
- No page holds more than ``per_page`` websites
- Every page index is below ``total_pages(count, per_page)``
"""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence

from sitegrid.core.exceptions import ConflictError, NotFoundError
from sitegrid.core.models import GridSize, Position, Website


def icons_per_page(grid_size: GridSize | str) -> int:
    """Page capacity for a grid size."""
    return GridSize(grid_size).icons_per_page


def total_pages(count: int, per_page: int) -> int:
    """Number of pages needed for ``count`` websites, never less than one."""
    if per_page <= 0:
        raise ValueError(f"Page capacity must be positive, got {per_page}")
    return max(1, math.ceil(count / per_page))


def sort_by_position(websites: Iterable[Website]) -> list[Website]:
    """Sort websites by ``(page, order)``."""
    return sorted(websites, key=lambda w: w.position.as_tuple())


def group_by_page(websites: Iterable[Website]) -> dict[int, list[Website]]:
    """Group websites by page, each group sorted by order."""
    pages: dict[int, list[Website]] = defaultdict(list)
    for website in sort_by_position(websites):
        pages[website.position.page].append(website)
    return dict(pages)


def page_websites(websites: Iterable[Website], page: int) -> list[Website]:
    """Websites on one page, sorted by order."""
    return sort_by_position(w for w in websites if w.position.page == page)


def last_page(websites: Iterable[Website]) -> int:
    """Highest occupied page index, or 0 for an empty collection."""
    return max((w.position.page for w in websites), default=0)


def next_position(websites: Sequence[Website], per_page: int) -> Position:
    """Position for a newly added website.

    The website goes to the end of the last occupied page, or to the start
    of a fresh page when that page is already full.
    """
    if not websites:
        return Position(page=0, order=0)

    page = last_page(websites)
    count = sum(1 for w in websites if w.position.page == page)
    if count >= per_page:
        return Position(page=page + 1, order=0)
    return Position(page=page, order=count)


def _renumber(websites: Sequence[Website], page: int) -> list[Website]:
    return [w.with_position(page, i) for i, w in enumerate(websites)]


def compact_page(websites: Iterable[Website], page: int) -> list[Website]:
    """Renumber one page so its orders are ``0..n-1``, keeping relative order."""
    websites = list(websites)
    others = [w for w in websites if w.position.page != page]
    return sort_by_position(others + _renumber(page_websites(websites, page), page))


def compact_all(websites: Iterable[Website]) -> list[Website]:
    """Renumber every page so its orders are contiguous."""
    result: list[Website] = []
    for page, members in group_by_page(websites).items():
        result.extend(_renumber(members, page))
    return sort_by_position(result)


def reorder_page(
    websites: Iterable[Website], page: int, ordered_ids: Sequence[str]
) -> list[Website]:
    """Assign ``order = index`` on ``page`` following ``ordered_ids``.

    Args:
        websites: All websites
        page: Page being reordered
        ordered_ids: Every id currently on ``page``, in the new order

    Returns:
        New list of websites

    Raises:
        ConflictError: If ``ordered_ids`` is not a permutation of the ids on
            the page
    """
    websites = list(websites)
    current = {w.id: w for w in websites if w.position.page == page}

    duplicates = sorted(i for i, n in Counter(ordered_ids).items() if n > 1)
    missing = sorted(set(current) - set(ordered_ids))
    extra = sorted(set(ordered_ids) - set(current))

    if duplicates or missing or extra:
        problems = []
        if missing:
            problems.append(f"missing {', '.join(missing)}")
        if extra:
            problems.append(f"not on page {page}: {', '.join(extra)}")
        if duplicates:
            problems.append(f"repeated {', '.join(duplicates)}")
        raise ConflictError(
            f"Order for page {page} does not match its websites ({'; '.join(problems)})",
            missing=missing,
            extra=extra,
            duplicates=duplicates,
        )

    reordered = [current[i].with_position(page, n) for n, i in enumerate(ordered_ids)]
    others = [w for w in websites if w.position.page != page]
    return sort_by_position(others + reordered)


def move(
    websites: Iterable[Website],
    website_id: str,
    page: int,
    order: int,
    per_page: int,
) -> list[Website]:
    """Move one website to ``(page, order)``.

    The source page is compacted and the website is inserted on the target
    page at ``order`` (clamped to the end of that page), shifting later
    websites down by one.

    Raises:
        NotFoundError: If ``website_id`` is unknown
        ConflictError: If the target is out of range or the target page is full
    """
    websites = list(websites)
    moving = next((w for w in websites if w.id == website_id), None)
    if moving is None:
        raise NotFoundError("Website", website_id)

    pages = total_pages(len(websites), per_page)
    if page < 0 or order < 0:
        raise ConflictError(f"Position ({page}, {order}) is negative")
    if page >= pages:
        raise ConflictError(f"Page {page} does not exist (total pages: {pages})")

    source = moving.position.page
    rest = [w for w in websites if w.id != website_id]
    target = page_websites(rest, page)
    if source != page and len(target) >= per_page:
        raise ConflictError(f"Page {page} is full ({per_page} websites)")

    target.insert(min(order, len(target)), moving)

    result = [w for w in rest if w.position.page not in (source, page)]
    result.extend(_renumber(target, page))
    if source != page:
        result.extend(_renumber(page_websites(rest, source), source))
    return sort_by_position(result)


def redistribute(websites: Iterable[Website], per_page: int) -> list[Website]:
    """Re-chunk all websites into pages of ``per_page``.

    Websites are flattened into one global sequence by ``(page, order)`` and
    cut into consecutive chunks, so relative order across the whole
    collection is preserved while page boundaries move.
    """
    if per_page <= 0:
        raise ValueError(f"Page capacity must be positive, got {per_page}")

    flat = sort_by_position(websites)
    return [
        w.with_position(index // per_page, index % per_page)
        for index, w in enumerate(flat)
    ]


def layout_problems(websites: Iterable[Website], per_page: int) -> list[str]:
    """Describe every violated layout invariant (empty when consistent)."""
    websites = list(websites)
    problems = []
    pages = total_pages(len(websites), per_page)

    for page, members in group_by_page(websites).items():
        if page < 0:
            problems.append(f"Negative page index {page}")
        if page >= pages:
            problems.append(f"Page {page} is beyond the last page ({pages - 1})")
        if len(members) > per_page:
            problems.append(f"Page {page} holds {len(members)} of {per_page}")
        orders = [w.position.order for w in members]
        if orders != list(range(len(members))):
            problems.append(f"Page {page} orders are not contiguous: {orders}")

    return problems


def needs_redistribution(websites: Iterable[Website], per_page: int) -> bool:
    """Check whether pages exceed capacity or lie beyond the last page."""
    websites = list(websites)
    pages = total_pages(len(websites), per_page)
    for page, members in group_by_page(websites).items():
        if page < 0 or page >= pages or len(members) > per_page:
            return True
    return False
