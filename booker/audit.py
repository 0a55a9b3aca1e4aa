import json
import os
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

_log_lock = threading.Lock()


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def append_json_file(path: str, entry: Dict[str, Any]) -> None:
    """
    Append an object to a JSON array file. Thread-safe within process via _log_lock.
    If the file is missing it is created; if it holds invalid JSON or
    undecodable bytes it is reset.
    """
    with _log_lock:
        if not os.path.exists(path):
            with open(path, "w", encoding="utf-8") as f:
                json.dump([entry], f, ensure_ascii=False, indent=2)
            return

        with open(path, "r+", encoding="utf-8") as f:
            try:
                data = json.load(f)
                if not isinstance(data, list):
                    data = [data]
            except ValueError:
                data = []
            data.append(entry)
            f.seek(0)
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.truncate()


def _body(content: bytes) -> Any:
    if not content:
        return None
    try:
        return json.loads(content)
    except ValueError:
        return content.decode("utf-8", errors="replace")


def exchange_entry(response: httpx.Response) -> Dict[str, Any]:
    """Standardized audit entry for one request/response pair."""
    request = response.request
    return {
        "timestamp": now_iso(),
        "method": request.method,
        "url": str(request.url),
        "status_code": response.status_code,
        "outcome": "success" if response.is_success else "failure",
        "request": _body(request.content),
        "response": _body(response.content),
    }


def append_exchange(path: str, response: httpx.Response, extra: Optional[Dict[str, Any]] = None) -> None:
    entry = exchange_entry(response)
    if extra:
        entry["extra"] = extra
    append_json_file(path, entry)


def rotate_audit_log(path: str, max_bytes: int = 2_000_000, backup_suffix: str = ".old") -> bool:
    """
    Move the audit log aside once it grows beyond max_bytes and start a fresh
    empty array. Returns True if a rotation happened.
    """
    if not os.path.exists(path):
        return False
    if os.path.getsize(path) <= max_bytes:
        return False
    backup = path + backup_suffix
    if os.path.exists(backup):
        os.remove(backup)
    os.replace(path, backup)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([], f)
    return True
