"""
Response helpers shared by the API views.
"""
from rest_framework import status
from rest_framework.response import Response

from apps.core.utils import page_bounds, parse_positive_int

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def success(message: str = None, status_code: int = status.HTTP_200_OK, **payload) -> Response:
    """``{"success": true, "message"?, ...payload}``"""
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return Response(body, status=status_code)


def paginate(request, queryset, default_limit: int = DEFAULT_PAGE_SIZE):
    """
    Slice ``queryset`` with the ``page``/``limit`` query parameters.

    Returns the page of rows and the pagination metadata.
    """
    page = parse_positive_int(request.query_params.get('page'), 1)
    limit = parse_positive_int(request.query_params.get('limit'), default_limit, maximum=MAX_PAGE_SIZE)
    total = queryset.count()
    bounds = page_bounds(page, limit, total)
    rows = list(queryset[bounds["offset"]:bounds["end"]])
    return rows, {
        "current_page": page,
        "limit": limit,
        "total_pages": bounds["total_pages"],
        "total": total,
    }
