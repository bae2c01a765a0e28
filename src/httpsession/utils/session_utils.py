from __future__ import annotations


def normalize_session_id(session_id: str | None) -> str | None:
    """Return the stripped session id carried by a request, or None.

    Missing, empty and whitespace-only values all mean "no session id".
    """
    if session_id is None:
        return None
    if not isinstance(session_id, str):
        return None
    cleaned = session_id.strip()
    if not cleaned:
        return None
    return cleaned
