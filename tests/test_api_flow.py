import httpx
import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from app.auth.jwt import mint_access
from app.main import create_app
from fixtures import empty_order, make_settings, silk_blouse_order


async def onboard_tailor(client: httpx.AsyncClient, name: str = "Elena Rossi") -> dict:
    await client.put("/v1/onboarding/tailor/basic", json={"name": name, "experience": "12"})
    await client.post("/v1/onboarding/tailor/specialties/Silk")
    await client.put("/v1/onboarding/tailor/rates/Silk", json={"amount": 40})
    kyc = await client.post("/v1/onboarding/tailor/kyc")
    assert kyc.json()["kyc_status"] == "Verified"
    resp = await client.post("/v1/onboarding/tailor/submit")
    assert resp.status_code == 200
    return resp.json()


@pytest.mark.asyncio
async def test_health_reports_mock_mode(client: httpx.AsyncClient):
    resp = await client.get("/v1/health")
    assert resp.status_code == 200
    assert resp.json()["store_mode"] == "mock"


@pytest.mark.asyncio
async def test_requests_need_a_token(client: httpx.AsyncClient):
    resp = await client.get("/v1/jobs")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_brand_and_tailor_flow(client: httpx.AsyncClient, login):
    login("brand-a")
    resp = await client.post("/v1/onboarding/brand", json={"name": "Acme Apparel"})
    assert resp.status_code == 200
    assert resp.json()["role"] == "Brand"

    resp = await client.post("/v1/jobs", json=silk_blouse_order())
    assert resp.status_code == 200
    job = resp.json()
    assert job["quantity"] == 10
    assert job["status"] == "Pending Match"
    assert job["brand_name"] == "Acme Apparel"

    mine = await client.get("/v1/jobs", params={"brand_id": "brand-a"})
    assert [j["id"] for j in mine.json()["items"]] == [job["id"]]

    recs = await client.get(f"/v1/jobs/{job['id']}/recommendations")
    assert recs.status_code == 200
    assert [r["uid"] for r in recs.json()["items"]] == ["tailor-1", "tailor-2", "tailor-3"]

    login("tailor-a")
    profile = await onboard_tailor(client)
    assert profile["rate_card"] == [{"skill": "Silk", "base_rate": 40}]

    board = await client.get("/v1/dashboard/tailor")
    assert job["id"] in [j["id"] for j in board.json()["open_jobs"]]

    accepted = await client.post(f"/v1/jobs/{job['id']}/accept")
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "In Production"
    assert accepted.json()["tailor_name"] == "Elena Rossi"

    again = await client.post(f"/v1/jobs/{job['id']}/accept")
    assert again.status_code == 409
    assert again.json()["detail"] == "job_not_pending"

    login("brand-a")
    funded = await client.post(
        f"/v1/jobs/{job['id']}/escrow", json={"tailor_id": "tailor-a", "tailor_name": "Elena Rossi"}
    )
    assert funded.status_code == 200
    assert funded.json()["escrow_status"] == "Held"

    dash = (await client.get("/v1/dashboard/brand")).json()
    assert dash["active_orders"] == 1
    assert dash["escrow_held"] == 5000

    login("tailor-a")
    board = (await client.get("/v1/dashboard/tailor")).json()
    assert [j["id"] for j in board["active_jobs"]] == [job["id"]]


@pytest.mark.asyncio
async def test_empty_order_returns_422(client: httpx.AsyncClient, login):
    login("brand-a")
    await client.post("/v1/onboarding/brand", json={"name": "Acme"})
    resp = await client.post("/v1/jobs", json=empty_order())
    assert resp.status_code == 422
    assert resp.json()["detail"] == "empty_order"


@pytest.mark.asyncio
async def test_roles_are_enforced(client: httpx.AsyncClient, login):
    login("tailor-b")
    await onboard_tailor(client, "Kim")
    resp = await client.post("/v1/jobs", json=silk_blouse_order())
    assert resp.status_code == 403
    assert resp.json()["detail"] == "brand_only"

    login("brand-b")
    await client.post("/v1/onboarding/brand", json={"name": "Other Brand"})
    resp = await client.post("/v1/jobs/job-preload-1/accept")
    assert resp.status_code == 403
    resp = await client.post(
        "/v1/jobs/job-preload-1/escrow", json={"tailor_id": "tailor-1", "tailor_name": "Elena"}
    )
    assert resp.status_code == 403
    assert resp.json()["detail"] == "not_job_owner"


@pytest.mark.asyncio
async def test_unknown_job_is_404(client: httpx.AsyncClient, login):
    login("anyone")
    resp = await client.get("/v1/jobs/job-missing")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "job_not_found"


@pytest.mark.asyncio
async def test_profile_patch_and_uploads(client: httpx.AsyncClient, login):
    login("brand-c")
    assert (await client.get("/v1/profiles/me")).status_code == 404
    await client.post("/v1/onboarding/brand", json={"name": "Acme"})

    patch = {"display_name": "Acme Studio"}
    first = await client.patch("/v1/profiles/me", json=patch)
    second = await client.patch("/v1/profiles/me", json=patch)
    assert first.json() == second.json()
    assert second.json()["brand_name"] == "Acme"

    image = await client.post("/v1/profiles/me/image")
    assert image.json()["profile_image"].startswith("https://")
    files = await client.post("/v1/jobs/design-files")
    assert len(files.json()["files"]) == 2

    resp = await client.patch("/v1/profiles/me", json={"role": "Tailor"})
    assert resp.status_code == 422
    assert resp.json()["detail"] == "role_immutable"


@pytest.mark.asyncio
async def test_tailor_submit_requires_kyc(client: httpx.AsyncClient, login):
    login("tailor-c")
    await client.put("/v1/onboarding/tailor/basic", json={"name": "Kim"})
    resp = await client.post("/v1/onboarding/tailor/submit")
    assert resp.status_code == 422
    assert resp.json()["detail"] == "kyc_not_verified"
    draft = await client.get("/v1/onboarding/tailor")
    assert draft.json()["name"] == "Kim"


@pytest.mark.asyncio
async def test_otp_login_and_refresh(client: httpx.AsyncClient):
    sent = await client.post("/v1/auth/otp/request", json={"email": "dev@stitch.cloud"})
    code = sent.json()["simulated_code"]
    assert code == "123456"

    bad = await client.post("/v1/auth/otp/verify", json={"email": "dev@stitch.cloud", "code": "999999"})
    assert bad.status_code == 422

    session = await client.post("/v1/auth/otp/verify", json={"email": "dev@stitch.cloud", "code": code})
    assert session.status_code == 200
    body = session.json()
    assert body["uid"] == "mock-user-dev"
    assert body["store_mode"] == "mock"
    assert body["profile"] is None

    headers = {"Authorization": f"Bearer {body['access']}"}
    resp = await client.post("/v1/onboarding/brand", json={"name": "Dev Brand"}, headers=headers)
    assert resp.json()["email"] == "dev@stitch.cloud"

    refreshed = await client.post("/v1/auth/refresh", json={"refresh": body["refresh"]})
    assert refreshed.status_code == 200
    wrong = await client.post("/v1/auth/refresh", json={"refresh": body["access"]})
    assert wrong.status_code == 401


def test_job_stream_over_websocket():
    app = create_app(make_settings())
    token = mint_access("watcher")
    with TestClient(app) as tc:
        with tc.websocket_connect(f"/v1/jobs/stream?token={token}") as ws:
            first = ws.receive_json()
            assert len(first["items"]) == 3
            stamps = [j["created_at"] for j in first["items"]]
            assert stamps == sorted(stamps, reverse=True)
        with tc.websocket_connect(f"/v1/jobs/stream?token={token}&brand_id=brand-2") as ws:
            assert [j["id"] for j in ws.receive_json()["items"]] == ["job-preload-2"]


def test_job_stream_rejects_bad_token():
    app = create_app(make_settings())
    with TestClient(app) as tc:
        with pytest.raises(WebSocketDisconnect):
            with tc.websocket_connect("/v1/jobs/stream?token=nope") as ws:
                ws.receive_json()


@pytest.mark.asyncio
async def test_second_onboarding_is_a_conflict(client: httpx.AsyncClient, login):
    login("brand-d")
    assert (await client.post("/v1/onboarding/brand", json={"name": "Acme"})).status_code == 200
    await client.patch("/v1/profiles/me", json={"profile_image": "https://img/me.jpg"})
    resp = await client.post("/v1/onboarding/brand", json={"name": "Acme"})
    assert resp.status_code == 409
    assert resp.json()["detail"] == "already_onboarded"
    me = await client.get("/v1/profiles/me")
    assert me.json()["profile_image"] == "https://img/me.jpg"
