"""
attendance_backend/utils/responses.py
Success envelope shared by every route: {success, message?, data?}

List endpoints put the page next to the collection:
{"success": true, "data": {"courses": [...], "pagination": {...}}}
"""
from typing import Any, Iterable, Optional

from attendance_backend.utils.pagination import Pagination


def envelope(data: Any = None, message: Optional[str] = None) -> dict:
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def page_envelope(key: str, items: Iterable[dict], pagination: Pagination) -> dict:
    return envelope({key: list(items), "pagination": pagination.to_dict()})
