"""요청 로깅 미들웨어 테스트 — 요청 ID, 마스킹, 로그 기록."""

import logging

from talentops.middleware.axiom_logging import REQUEST_ID_HEADER, mask_sensitive


class TestMaskSensitive:
    """민감 필드 마스킹 테스트"""

    def test_masks_nested_keys(self):
        data = {"name": "Eve", "auth": {"access_token": "abc", "Password": "pw"}}
        assert mask_sensitive(data) == {"name": "Eve", "auth": {"access_token": "***", "Password": "***"}}

    def test_truncates_long_lists(self):
        assert len(mask_sensitive(list(range(50)))) == 20

    def test_truncates_long_strings(self):
        assert mask_sensitive("x" * 2500).endswith("...(truncated)")

    def test_depth_limit(self):
        deep = {"a": {"b": {"c": {"d": {"e": {"f": {"g": 1}}}}}}}
        assert mask_sensitive(deep)["a"]["b"]["c"]["d"]["e"]["f"] == "..."


class TestRequestLogging:
    """요청 로깅 테스트"""

    async def test_generates_request_id(self, client):
        resp = await client.get("/api/timecards")
        assert resp.headers[REQUEST_ID_HEADER]

    async def test_echoes_request_id(self, client):
        resp = await client.get("/api/timecards", headers={REQUEST_ID_HEADER: "req-123"})
        assert resp.headers[REQUEST_ID_HEADER] == "req-123"

    async def test_logs_status(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="talentops.access"):
            resp = await client.get("/api/timecards", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert any("GET /api/timecards -> 401" in r.getMessage() for r in caplog.records)

    async def test_health_is_not_logged(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="talentops.access"):
            resp = await client.get("/health")
        assert resp.status_code == 200
        assert REQUEST_ID_HEADER not in resp.headers
        assert not [r for r in caplog.records if r.name == "talentops.access"]
