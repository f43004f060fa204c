import requests


def error_message(resp: requests.Response) -> str:
    """Human-readable text from a FastAPI error response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None

    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        messages = [
            str(item.get("msg", "")).removeprefix("Value error, ")
            for item in detail if isinstance(item, dict)
        ]
        if any(messages):
            return " ".join(m for m in messages if m)
    return f"Request failed ({resp.status_code})"


def bearer(token: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}
