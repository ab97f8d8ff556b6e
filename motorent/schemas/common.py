from typing import Any


# ─── Helper Functions ─────────────────────────────────────────────────────────
def success_response(message: str, data: Any = None) -> dict:
    """Return a standardized success dict (used in route handlers)."""
    return {"success": True, "message": message, "data": data}


def paginated_response(message: str, data: list, total: int, page: int, limit: int) -> dict:
    total_pages = (total + limit - 1) // limit if limit > 0 else 0
    return {
        "success": True,
        "message": message,
        "data": data,
        "meta": {
            "page":       page,
            "limit":      limit,
            "total":      total,
            "totalPages": total_pages,
            "hasNext":    page < total_pages,
            "hasPrev":    page > 1,
        },
    }


def error_body(code: str, message: str, details: list | None = None, field: str | None = None) -> dict:
    return {
        "success": False,
        "message": message,
        "error": {"code": code, "details": details, "field": field},
    }
