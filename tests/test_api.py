import importlib
import os
import socket
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import httpx
from fastapi.testclient import TestClient

import status_proxy.main as main_mod
from status_proxy.config import Settings
from status_proxy.main import create_app
from status_proxy.models import JsonRpcCheck, Registry, TcpCheck


def closed_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def make_client(checks=(), origins=("https://a.com", "https://b.com"), transport=None) -> TestClient:
    settings = Settings(
        request_timeout_ms=2000,
        allowed_origins=tuple(origins),
        registry=Registry(checks=tuple(checks)),
    )
    return TestClient(create_app(settings, transport=transport))


class HealthzTests(unittest.TestCase):
    def test_healthz(self) -> None:
        resp = make_client().get("/healthz")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertIs(body["ok"], True)
        self.assertIsInstance(body["uptime_s"], int)
        self.assertGreaterEqual(body["uptime_s"], 0)
        self.assertEqual(resp.headers["content-type"], "application/json; charset=utf-8")
        self.assertEqual(resp.headers["cache-control"], "no-store")

    def test_healthz_does_not_run_probes(self) -> None:
        with patch("status_proxy.main.run_checks") as run_checks_mock:
            resp = make_client().get("/healthz")

        self.assertEqual(resp.status_code, 200)
        run_checks_mock.assert_not_called()


class RoutingErrorTests(unittest.TestCase):
    def test_unknown_path_is_404(self) -> None:
        resp = make_client().get("/unknown-path")

        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "not_found"})
        self.assertEqual(resp.headers["access-control-allow-origin"], "https://a.com")

    def test_post_endpoint_status_is_405(self) -> None:
        resp = make_client().post("/endpoint-status")

        self.assertEqual(resp.status_code, 405)
        self.assertEqual(resp.json(), {"error": "method_not_allowed"})
        self.assertEqual(resp.headers["cache-control"], "no-store")

    def test_docs_routes_are_not_exposed(self) -> None:
        client = make_client()

        self.assertEqual(client.get("/docs").status_code, 404)
        self.assertEqual(client.get("/openapi.json").status_code, 404)


class CorsTests(unittest.TestCase):
    def test_preflight_on_any_path(self) -> None:
        resp = make_client().options("/whatever", headers={"Origin": "https://b.com"})

        self.assertEqual(resp.status_code, 204)
        self.assertEqual(resp.content, b"")
        self.assertEqual(resp.headers["access-control-allow-origin"], "https://b.com")
        self.assertEqual(resp.headers["access-control-allow-methods"], "GET, OPTIONS")
        self.assertEqual(resp.headers["access-control-allow-headers"], "content-type")

    def test_listed_origin_is_echoed(self) -> None:
        resp = make_client().get("/healthz", headers={"Origin": "https://b.com"})

        self.assertEqual(resp.headers["access-control-allow-origin"], "https://b.com")

    def test_unlisted_origin_gets_first_configured(self) -> None:
        resp = make_client().get("/healthz", headers={"Origin": "https://evil.com"})

        self.assertEqual(resp.headers["access-control-allow-origin"], "https://a.com")

    def test_empty_allow_list_is_wildcard(self) -> None:
        resp = make_client(origins=()).get("/healthz", headers={"Origin": "https://x.com"})

        self.assertEqual(resp.headers["access-control-allow-origin"], "*")


class EndpointStatusTests(unittest.TestCase):
    def test_runner_failure_is_500(self) -> None:
        with patch("status_proxy.main.run_checks", side_effect=RuntimeError("boom")):
            with self.assertLogs("status_proxy.main", level="ERROR"):
                resp = make_client().get("/endpoint-status")

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "status_check_failed", "detail": "boom"})
        self.assertEqual(resp.headers["content-type"], "application/json; charset=utf-8")

    def test_jsonrpc_up_and_refused_tcp_down(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "v1"})

        port = closed_port()
        client = make_client(
            checks=(
                JsonRpcCheck(id="evm", url="http://evm.local"),
                TcpCheck(id="grpc", host="127.0.0.1", port=port),
            ),
            transport=httpx.MockTransport(handler),
        )

        resp = client.get("/endpoint-status")

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["source"], "server")
        self.assertTrue(body["checked_at"].endswith("Z"))
        self.assertEqual(list(body["statuses"]), ["evm", "grpc"])

        evm = body["statuses"]["evm"]
        self.assertEqual(evm["status"], "UP")
        self.assertGreaterEqual(evm["latency_ms"], 0)
        self.assertLess(evm["latency_ms"], 2000)
        self.assertEqual(evm["detail"], f"Latency {evm['latency_ms']}ms")

        grpc = body["statuses"]["grpc"]
        self.assertEqual(grpc["status"], "DOWN")
        self.assertIsNone(grpc["latency_ms"])
        self.assertIn(str(port), grpc["detail"])


class ServerEntryPointTests(unittest.TestCase):
    def test_import_does_not_read_settings(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            missing = str(Path(td) / "missing-checks.yml")
            with patch.dict(os.environ, {"CHECKS_FILE": missing}):
                mod = importlib.reload(importlib.import_module("status_proxy.main"))

        self.assertTrue(callable(mod.create_app))

    def test_run_reads_settings_once(self) -> None:
        settings = Settings(port=9999, registry=Registry())
        with patch(
            "status_proxy.main.Settings.from_env", return_value=settings
        ) as from_env_mock, patch("status_proxy.main.uvicorn.run") as uvicorn_run_mock:
            main_mod.run()

        from_env_mock.assert_called_once_with()
        args, kwargs = uvicorn_run_mock.call_args
        self.assertIs(args[0].state.settings, settings)
        self.assertEqual(kwargs["host"], "127.0.0.1")
        self.assertEqual(kwargs["port"], 9999)


class OpenAPITests(unittest.TestCase):
    def test_openapi_schema_generation(self) -> None:
        schema = create_app(Settings()).openapi()

        self.assertIn("openapi", schema)
        self.assertIn("/healthz", schema["paths"])
        self.assertIn("/endpoint-status", schema["paths"])


if __name__ == "__main__":
    unittest.main()
