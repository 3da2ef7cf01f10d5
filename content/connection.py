# This software is Copyright ©️ 2020 The University of Southern California. All Rights Reserved.
# Permission to use, copy, modify, and distribute this software and its documentation for educational, research and non-profit purposes, without fee, and without a written agreement is hereby granted, provided that the above copyright notice and subject to the full license file found in the root of this software deliverable. Permission to make commercial use of this software may be obtained by contacting:  USC Stevens Center for Innovation University of Southern California 1150 S. Olive Street, Suite 2300, Los Angeles, CA 90115, USA Email: accounting@stevens.usc.edu
#
# The full terms of this copyright and license should always be found in the root directory of this software deliverable as "license.txt" and if these terms are not found with this software, please contact the USC Stevens Center for the full license.
#
#
from typing import Any, Callable, Dict, List, Optional, Union

from content.constants import DEFAULT_LIMIT
from content.cursor import NEXT, PREV, decode_cursor, encode_cursor
from content.ids import And, Eq, Filter, Or, is_empty, parse_filter, widen_ids
from content.logger import get_logger
from content.store import Store, encode_boundary

log = get_logger("connection")

NOT_DELETED = Or((Eq("deleted", False), Eq("deleted", None)))

FilterInvalid = Callable[[List[dict], Any], List[dict]]


def coerce_limit(limit) -> int:
    try:
        value = int(limit)
    except (TypeError, ValueError):
        return DEFAULT_LIMIT
    return value if value > 0 else DEFAULT_LIMIT


def exclude_deleted(f: Filter) -> Filter:
    return NOT_DELETED if is_empty(f) else And((f, NOT_DELETED))


def find_all(
    store: Store,
    collection: str,
    filter: Union[Filter, Dict[str, Any], None] = None,
    limit=None,
    sort_by: Optional[str] = None,
    sort_ascending: Optional[bool] = None,
    cursor: Optional[str] = None,
    filter_invalid: Optional[FilterInvalid] = None,
    context=None,
) -> Dict[str, Any]:
    """
    Returns one page of a collection as a connection: edges with cursors
    plus pageInfo. Soft-deleted documents are never returned.

    filter_invalid(nodes, context) may drop or rewrite nodes after the page
    is fetched. Cursors always come from the unfiltered page, so a page can
    be shorter than limit and still report a next page.
    """
    if filter is None or isinstance(filter, dict):
        filter = parse_filter(filter)
    query = exclude_deleted(widen_ids(filter))
    paginated_field = sort_by or "_id"
    decoded = decode_cursor(cursor)
    page = store.paginate(
        collection,
        query,
        limit=coerce_limit(limit),
        paginated_field=paginated_field,
        sort_ascending=bool(sort_ascending),
        next=decoded.boundary if decoded and decoded.direction == NEXT else None,
        previous=decoded.boundary if decoded and decoded.direction == PREV else None,
    )
    nodes = page.results
    if filter_invalid is not None:
        nodes = filter_invalid(nodes, context)
        log.debug("%s: %d of %d nodes visible", collection, len(nodes), len(page.results))
    return {
        "edges": [
            {
                "cursor": encode_cursor(NEXT, encode_boundary(paginated_field, n)),
                "node": n,
            }
            for n in nodes
        ],
        "pageInfo": {
            "startCursor": encode_cursor(PREV, page.previous)
            if page.has_previous and page.previous
            else None,
            "endCursor": encode_cursor(NEXT, page.next)
            if page.has_next and page.next
            else None,
            "hasNextPage": page.has_next,
            "hasPreviousPage": page.has_previous,
        },
    }
