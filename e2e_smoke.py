from __future__ import annotations

from fastapi.testclient import TestClient

from campaign_market.main import app


def run_smoke() -> None:
    client = TestClient(app)
    client.get("/health/ping").raise_for_status()
    client.get("/").raise_for_status()
    resp = client.get("/me/applications")
    assert resp.status_code == 401, resp.text
    assert resp.json()["code"] == "UNAUTHORIZED"
    print("Smoke test completed. unauthenticated=", resp.json()["message"])


if __name__ == "__main__":
    run_smoke()
