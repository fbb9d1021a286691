from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def test_defaults(monkeypatch):
    from burn_watcher.config import DEFAULT_RPC_URL, DEFAULT_USDC_MINT, AppSettings

    for name in ("RPC_URL", "BW_RPC_URL", "USDC_MINT", "BW_WATCH_ADDRESS", "WATCH_ADDRESS"):
        monkeypatch.delenv(name, raising=False)
    s = AppSettings()
    assert s.rpc_url == DEFAULT_RPC_URL
    assert s.watch_address == DEFAULT_USDC_MINT
    assert s.poll_interval_sec == 10.0
    assert s.signature_limit == 20
    assert s.token_program == "spl-token"
    assert s.bootstrap == "adopt"
    assert s.database_url is None


def test_legacy_env_names(monkeypatch):
    from burn_watcher.config import AppSettings

    monkeypatch.setenv("RPC_URL", "https://rpc.example")
    monkeypatch.setenv("USDC_MINT", "Mint111")
    s = AppSettings()
    assert s.rpc_url == "https://rpc.example"
    assert s.watch_address == "Mint111"


def test_prefixed_env_and_coercion(monkeypatch):
    from burn_watcher.config import AppSettings

    monkeypatch.delenv("RPC_URL", raising=False)
    monkeypatch.setenv("BW_RPC_URL", "https://prefixed.example")
    monkeypatch.setenv("BW_POLL_INTERVAL_SEC", "2.5")
    monkeypatch.setenv("BW_BOOTSTRAP", "process")
    monkeypatch.setenv("BW_DATABASE_URL", "")
    monkeypatch.setenv("BW_LOG_LEVEL", " debug ")
    s = AppSettings()
    assert s.rpc_url == "https://prefixed.example"
    assert s.poll_interval_sec == 2.5
    assert s.bootstrap == "process"
    assert s.database_url is None
    assert s.log_level == "DEBUG"


def test_invalid_values_rejected(monkeypatch):
    from pydantic import ValidationError

    from burn_watcher.config import AppSettings

    monkeypatch.setenv("BW_BOOTSTRAP", "backfill")
    with pytest.raises(ValidationError):
        AppSettings()
    monkeypatch.delenv("BW_BOOTSTRAP")
    with pytest.raises(ValidationError):
        AppSettings(poll_interval_sec=0)
    with pytest.raises(ValidationError):
        AppSettings(signature_limit=0)


def test_api_endpoints_with_sqlite(tmp_path, monkeypatch):
    db_path = tmp_path / "bw.db"
    db_url = f"sqlite+pysqlite:///{db_path}"
    monkeypatch.setenv("BW_DATABASE_URL", db_url)

    # Import after setting env so the module picks it up
    from services.api.main import SessionFactory, app
    from burn_watcher.detector import BurnEvent
    from burn_watcher.sinks import DatabaseSink

    sink = DatabaseSink(SessionFactory, watch_address="Mint111")
    sink.emit(BurnEvent("s1", "M", "A", "100"), 1700000000.0)
    sink.emit(BurnEvent("s2", "M", "B", "5", inner=True), 1700000001.0)

    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = client.get("/burns", params={"limit": 1})
    assert r.status_code == 200
    rows = r.json()
    assert len(rows) == 1
    assert rows[0]["signature"] == "s2"
    assert rows[0]["inner"] is True
    assert rows[0]["amount"] == "5"

    r = client.get("/summary")
    assert r.status_code == 200
    data = r.json()
    assert data["total_burns"] == 2
    assert data["latest_signature"] == "s2"
