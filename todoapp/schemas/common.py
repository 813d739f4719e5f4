# todoapp/schemas/common.py
import math
from typing import Any, Optional

from pydantic import BaseModel


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


def envelope(data: Any = None, message: Optional[str] = None, pagination: Optional[Pagination] = None) -> dict:
    """Wrap a successful result in the standard response envelope"""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if pagination is not None:
        body["pagination"] = pagination
    return body
