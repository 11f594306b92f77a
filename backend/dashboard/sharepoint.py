from collections import Counter
from datetime import datetime
from typing import Iterable

REQUEST_PREFIX = "sharepoint_request:"

SUBMITTED = "Submitted"
IN_PROGRESS = "In Progress"
PUBLISHED = "Published"

def request_key(request_id: str) -> str:
    return f"{REQUEST_PREFIX}{request_id}"

def next_request_id(existing_count: int, year: int) -> str:
    return f"SPS-{year}-{existing_count + 1:04d}"

def new_request(payload: dict, existing_count: int, now: datetime) -> dict:
    request_id = next_request_id(existing_count, now.year)
    return {
        **payload,
        "requestId": request_id,
        "currentStatus": SUBMITTED,
        "requestedDate": now.date().isoformat(),
        "createdAt": now.isoformat(),
    }

def apply_update(existing: dict, updates: dict, now: datetime) -> dict:
    return {**existing, **updates, "updatedAt": now.isoformat()}

def status_counts(requests: Iterable[dict]) -> dict:
    counts = Counter(r.get("currentStatus") for r in requests)
    return {s: counts.get(s, 0) for s in (SUBMITTED, IN_PROGRESS, PUBLISHED)}
