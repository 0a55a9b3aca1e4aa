import json

import httpx

from booker.audit import append_exchange, append_json_file, exchange_entry, rotate_audit_log


def read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_append_creates_and_extends(tmp_path):
    path = tmp_path / "validation-output.json"
    append_json_file(str(path), {"n": 1})
    append_json_file(str(path), {"n": 2})
    assert read(path) == [{"n": 1}, {"n": 2}]


def test_append_resets_corrupt_file(tmp_path):
    path = tmp_path / "validation-output.json"
    path.write_text("{not json", encoding="utf-8")
    append_json_file(str(path), {"n": 1})
    assert read(path) == [{"n": 1}]


def test_append_resets_undecodable_file(tmp_path):
    path = tmp_path / "validation-output.json"
    path.write_bytes(b"\xff\xfe garbage")
    append_json_file(str(path), {"n": 1})
    assert read(path) == [{"n": 1}]


def test_append_wraps_single_object(tmp_path):
    path = tmp_path / "validation-output.json"
    path.write_text(json.dumps({"n": 0}), encoding="utf-8")
    append_json_file(str(path), {"n": 1})
    assert read(path) == [{"n": 0}, {"n": 1}]


def test_exchange_entry():
    request = httpx.Request("POST", "http://booker.test/auth", json={"username": "admin"})
    response = httpx.Response(200, json={"reason": "Bad credentials"}, request=request)
    entry = exchange_entry(response)
    assert entry["method"] == "POST"
    assert entry["url"] == "http://booker.test/auth"
    assert entry["status_code"] == 200
    assert entry["outcome"] == "success"
    assert entry["request"] == {"username": "admin"}
    assert entry["response"] == {"reason": "Bad credentials"}
    assert "timestamp" in entry


def test_exchange_entry_plain_text_and_failure(tmp_path):
    request = httpx.Request("GET", "http://booker.test/booking/1")
    response = httpx.Response(404, text="Not Found", request=request)
    path = tmp_path / "audit.json"
    append_exchange(str(path), response, extra={"note": "missing"})

    [entry] = read(path)
    assert entry["outcome"] == "failure"
    assert entry["request"] is None
    assert entry["response"] == "Not Found"
    assert entry["extra"] == {"note": "missing"}


def test_rotate(tmp_path):
    path = tmp_path / "audit.json"
    assert rotate_audit_log(str(path)) is False

    path.write_text(json.dumps([{"x": "y" * 100}]), encoding="utf-8")
    assert rotate_audit_log(str(path), max_bytes=10_000) is False
    assert rotate_audit_log(str(path), max_bytes=10) is True
    assert read(path) == []
    assert read(tmp_path / "audit.json.old") == [{"x": "y" * 100}]
