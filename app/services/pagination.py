import math
from typing import Any, Sequence
from urllib.parse import urlencode

DEFAULT_PER_PAGE = 10


def build_page_url(base_path: str, filters: dict[str, Any], page: int, per_page: int) -> str:
    """
    Rebuild the query string of a listing request for another page.

    Every supplied filter is kept in its original order, ``page`` is
    replaced (or appended) and ``limit`` is appended when it was absent.
    """
    params = [(key, value) for key, value in filters.items() if value is not None]

    if any(key == "page" for key, _ in params):
        params = [(key, page if key == "page" else value) for key, value in params]
    else:
        params.append(("page", page))

    if not any(key == "limit" for key, _ in params):
        params.append(("limit", per_page))

    return f"{base_path}?{urlencode(params)}"


def paginate(
    filters: dict[str, Any],
    items: Sequence[Any],
    total: int,
    base_path: str,
) -> dict[str, Any]:
    """
    Assemble the pagination envelope for one page of results.

    ``filters`` are the validated query parameters (absent ones omitted),
    ``items`` the rows of the requested page and ``total`` the number of
    matches across all pages.
    """
    per_page = filters.get("limit") or DEFAULT_PER_PAGE
    current_page = filters.get("page") or 1

    # lastPage is never 0, even for an empty result
    last_page = math.ceil(total / per_page) if total > 0 else 1
    from_ = (current_page - 1) * per_page + 1 if total > 0 else 0
    to = from_ + len(items) - 1 if total > 0 else 0

    next_page_url = (
        build_page_url(base_path, filters, current_page + 1, per_page)
        if current_page < last_page
        else None
    )
    prev_page_url = (
        build_page_url(base_path, filters, current_page - 1, per_page)
        if current_page > 1
        else None
    )

    return {
        "total": total,
        "perPage": per_page,
        "currentPage": current_page,
        "lastPage": last_page,
        "from": from_,
        "to": to,
        "nextPageUrl": next_page_url,
        "prevPageUrl": prev_page_url,
        "path": base_path,
        "data": list(items),
    }
