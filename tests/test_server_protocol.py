"""Tests for the JSON-lines protocol message types."""

from __future__ import annotations

import json

import pytest

from guesswork.server.protocol import Notification, Request, Response


class TestRequest:
    def test_from_dict_full(self):
        data = {"id": 1, "method": "generateLevel", "params": {"levelNumber": 3}}
        req = Request.from_dict(data)
        assert req.id == 1
        assert req.method == "generateLevel"
        assert req.params == {"levelNumber": 3}

    def test_from_dict_no_params(self):
        req = Request.from_dict({"id": 2, "method": "getState"})
        assert req.params == {}

    def test_from_dict_null_params(self):
        req = Request.from_dict({"id": 2, "method": "getState", "params": None})
        assert req.params == {}

    def test_from_json_line(self):
        req = Request.from_json_line('{"id": 7, "method": "guess", "params": {"guess": 12}}')
        assert req == Request(id=7, method="guess", params={"guess": 12})

    def test_from_json_line_defaults_id(self):
        assert Request.from_json_line('{"method": "tick"}').id == 0

    @pytest.mark.parametrize("line", [
        "not json",
        "[1, 2, 3]",
        '{"id": 1}',
        '{"id": 1, "method": "guess", "params": [12]}',
    ])
    def test_from_json_line_rejects(self, line):
        with pytest.raises(ValueError):
            Request.from_json_line(line)


class TestResponse:
    def test_success_json_line(self):
        resp = Response(id=1, result={"accuracy": 0.6})
        line = resp.to_json_line()
        assert line.endswith("\n")
        assert json.loads(line) == {"id": 1, "result": {"accuracy": 0.6}}

    def test_error_json_line(self):
        parsed = json.loads(Response(id=2, error="Unknown method: foo").to_json_line())
        assert parsed == {"id": 2, "error": "Unknown method: foo"}
        assert "result" not in parsed

    def test_failure_names_exception(self):
        parsed = json.loads(Response.failure(4, ValueError("bad seed")).to_json_line())
        assert parsed == {"id": 4, "error": "bad seed", "errorType": "ValueError"}

    def test_null_result(self):
        parsed = json.loads(Response(id=3, result=None).to_json_line())
        assert parsed["result"] is None


class TestNotification:
    def test_json_line(self):
        notif = Notification("levelComplete", {"result": {"won": True}})
        line = notif.to_json_line()
        assert line.endswith("\n")
        assert json.loads(line) == {"method": "levelComplete", "params": {"result": {"won": True}}}

    def test_level_complete(self):
        notif = Notification.level_complete({"won": False}, {"skillLevel": 40}, None)
        assert notif.method == "levelComplete"
        assert notif.params == {"result": {"won": False}, "metrics": {"skillLevel": 40}, "nextLevel": None}

    def test_empty_params(self):
        assert json.loads(Notification("ping").to_json_line()) == {"method": "ping", "params": {}}
