from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from pawchess.config import Settings
from pawchess.protocol.http.app import create_app


def _app() -> FastAPI:
    return create_app(Settings(opponent_delay_ms=0, seed=7))


def test_error_envelope_for_http_exception() -> None:
    app = _app()

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    body = r.json()
    assert "error" in body
    err = body["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"]


def test_error_envelope_for_validation_error() -> None:
    client = TestClient(_app())
    game_id = client.post("/api/games").json()["game_id"]
    r = client.post(f"/api/games/{game_id}/select", json={"square": 99})
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "unprocessable_entity"
    assert err["field_errors"]
    assert any("square" in fe["field"] for fe in err["field_errors"])


def test_unhandled_exception_maps_to_internal_error() -> None:
    app = _app()

    @app.get("/crash")
    def crash():  # type: ignore[no-redef]
        raise RuntimeError("kaboom")

    client = TestClient(app, raise_server_exceptions=False)
    r = client.get("/crash")
    assert r.status_code == 500
    err = r.json()["error"]
    assert err["code"] == "internal_error"
    assert err["type"] == "server_error"
    assert err["message"] == "Internal Server Error"
