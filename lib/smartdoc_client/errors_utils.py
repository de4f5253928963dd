from __future__ import annotations

import json

from .errors import ApiError


def parse_api_error_detail(details: str | None) -> dict | None:
    if not details:
        return None
    try:
        data = json.loads(details)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def format_api_error(exc: ApiError) -> str:
    """Render an API error for display, including per-field validation messages."""
    lines = [exc.message]
    detail = exc.detail
    if isinstance(detail, list):
        # FastAPI style: [{"loc": [...], "msg": "..."}]
        lines = [f"Request rejected ({exc.status_code})"]
        for item in detail:
            if not isinstance(item, dict):
                lines.append(f"- {item}")
                continue
            loc = item.get("loc") or []
            field_name = ".".join(str(p) for p in loc if p != "body") or "-"
            lines.append(f"- {field_name}: {item.get('msg') or item}")
        return "\n".join(lines)

    data = parse_api_error_detail(exc.details)
    if data and isinstance(data.get("details"), list):
        if isinstance(data.get("error"), str) and data["error"] != exc.message:
            lines = [data["error"]]
        for item in data["details"]:
            if isinstance(item, dict):
                lines.append(f"- {item.get('field') or '-'}: {item.get('message') or item}")
    return "\n".join(lines)
