"""HTTP API tests: routes, status codes, camelCase wire format, error envelope.

Design Decisions:
    - Identity is passed as the X-User-Id header, the way the authentication
      collaborator forwards it
    - Most flows run on the in-memory store; one end-to-end flow runs on SQLite
"""

from httpx import ASGITransport, AsyncClient

from jawastock.infrastructure.sql_store import SqlMarketplaceStore
from jawastock.main import app

from tests.services.factories import asset_payload, headers, seed_accounts, user_payload


def _camel_asset(**overrides) -> dict:
    payload = asset_payload(**overrides)
    payload["thumbnailUrl"] = payload.pop("thumbnail_url")
    return payload


async def _approved_asset_id(client, accounts, **overrides) -> int:
    created = await client.post(
        "/api/assets", json=_camel_asset(**overrides), headers=headers(accounts.contributor),
    )
    assert created.status_code == 201
    asset_id = created.json()["id"]
    moderated = await client.patch(
        f"/api/assets/{asset_id}/status", json={"status": "approved"},
        headers=headers(accounts.admin),
    )
    assert moderated.status_code == 200
    return asset_id


# ─── Health ──────────────────────────────────────────────────────

async def test_health(client):
    resp = await client.get("/api/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_ready_with_memory_store(client):
    resp = await client.get("/api/health/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"] == {"store": "memory"}


# ─── Auth ────────────────────────────────────────────────────────

async def test_register_returns_camel_case_without_password(client):
    resp = await client.post("/api/auth/register", json={
        **user_payload("alice"), "firstName": "Alice",
    })
    assert resp.status_code == 201
    body = resp.json()
    assert body["username"] == "alice"
    assert body["firstName"] == "Alice"
    assert body["role"] == "user"
    assert "createdAt" in body
    assert "password" not in body


async def test_register_duplicate_returns_409(client):
    await client.post("/api/auth/register", json=user_payload("alice"))
    resp = await client.post(
        "/api/auth/register", json=user_payload("alice", email="new@jawastock.test"),
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "DUPLICATE_KEY"


async def test_register_admin_anonymously_forbidden(client):
    resp = await client.post("/api/auth/register", json=user_payload("eve", role="admin"))
    assert resp.status_code == 403


async def test_register_invalid_body_returns_400(client):
    resp = await client.post("/api/auth/register", json={"username": "al"})
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"]


async def test_login(client):
    await client.post("/api/auth/register", json=user_payload("alice"))
    ok = await client.post("/api/auth/login", json={
        "email": "alice@jawastock.test", "password": "password1",
    })
    assert ok.status_code == 200
    assert ok.json()["username"] == "alice"
    bad = await client.post("/api/auth/login", json={
        "email": "alice@jawastock.test", "password": "wrong-pass",
    })
    assert bad.status_code == 401


async def test_me_requires_identity(client, accounts):
    assert (await client.get("/api/auth/me")).status_code == 401
    assert (await client.get("/api/auth/me", headers={"X-User-Id": "999"})).status_code == 401
    resp = await client.get("/api/auth/me", headers=headers(accounts.buyer))
    assert resp.status_code == 200
    assert resp.json()["id"] == accounts.buyer.user_id


async def test_list_users_admin_only(client, accounts):
    assert (await client.get("/api/users", headers=headers(accounts.buyer))).status_code == 403
    resp = await client.get("/api/users", headers=headers(accounts.admin))
    assert resp.status_code == 200
    assert len(resp.json()) == 3


# ─── Assets ──────────────────────────────────────────────────────

async def test_upload_creates_pending_asset(client, accounts):
    resp = await client.post(
        "/api/assets", json=_camel_asset(), headers=headers(accounts.contributor),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert body["authorId"] == accounts.contributor.user_id
    assert body["thumbnailUrl"].endswith("_thumb.jpg")


async def test_upload_as_buyer_forbidden(client, accounts):
    resp = await client.post("/api/assets", json=_camel_asset(), headers=headers(accounts.buyer))
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "FORBIDDEN"


async def test_upload_negative_price_rejected(client, accounts):
    resp = await client.post(
        "/api/assets", json=_camel_asset(price=-5), headers=headers(accounts.contributor),
    )
    assert resp.status_code == 400


async def test_pending_asset_is_404_for_others(client, accounts):
    created = await client.post(
        "/api/assets", json=_camel_asset(), headers=headers(accounts.contributor),
    )
    asset_id = created.json()["id"]
    assert (await client.get(f"/api/assets/{asset_id}")).status_code == 404
    owner_view = await client.get(f"/api/assets/{asset_id}", headers=headers(accounts.contributor))
    assert owner_view.status_code == 200


async def test_browse_filters_and_sorts(client, accounts):
    beach = await _approved_asset_id(client, accounts, title="Sunset Beach", price=999)
    lake = await _approved_asset_id(
        client, accounts, title="Mountain Lake", price=1499, tags=["mountain"],
    )
    city = await _approved_asset_id(
        client, accounts, title="City Night", price=500, type="video",
        tags=["night"], categories=["urban"],
    )

    newest = await client.get("/api/assets")
    assert [a["id"] for a in newest.json()] == [city, lake, beach]

    text = await client.get("/api/assets", params={"query": "beach"})
    assert [a["id"] for a in text.json()] == [beach]

    priced = await client.get("/api/assets", params={"minPrice": 500, "maxPrice": 1000})
    assert sorted(a["id"] for a in priced.json()) == [beach, city]

    cats = await client.get("/api/assets", params=[
        ("categories", "nature"), ("categories", "urban"),
    ])
    assert len(cats.json()) == 3

    cheap_first = await client.get("/api/assets", params={"sort": "price_low", "limit": 2})
    assert [a["id"] for a in cheap_first.json()] == [city, beach]

    videos = await client.get("/api/assets", params={"type": "video"})
    assert [a["id"] for a in videos.json()] == [city]


async def test_browse_invalid_parameters_return_400(client):
    assert (await client.get("/api/assets", params={"type": "painting"})).status_code == 400
    crossed = await client.get("/api/assets", params={"minPrice": 900, "maxPrice": 100})
    assert crossed.status_code == 400
    assert crossed.json()["error"]["details"][0]["field"] == "min_price"


async def test_moderation_flow(client, accounts):
    asset_id = await _approved_asset_id(client, accounts)
    again = await client.patch(
        f"/api/assets/{asset_id}/status", json={"status": "rejected"},
        headers=headers(accounts.admin),
    )
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "INVALID_TRANSITION"


async def test_moderation_requires_admin(client, accounts):
    created = await client.post(
        "/api/assets", json=_camel_asset(), headers=headers(accounts.contributor),
    )
    resp = await client.patch(
        f"/api/assets/{created.json()['id']}/status", json={"status": "approved"},
        headers=headers(accounts.contributor),
    )
    assert resp.status_code == 403


async def test_pending_queue(client, accounts):
    await client.post("/api/assets", json=_camel_asset(), headers=headers(accounts.contributor))
    resp = await client.get("/api/admin/pending-assets", headers=headers(accounts.admin))
    assert resp.status_code == 200
    assert [a["status"] for a in resp.json()] == ["pending"]
    assert (await client.get("/api/admin/pending-assets")).status_code == 401


async def test_author_listing(client, accounts):
    asset_id = await _approved_asset_id(client, accounts)
    resp = await client.get(f"/api/assets/author/{accounts.contributor.user_id}")
    assert [a["id"] for a in resp.json()] == [asset_id]


# ─── Cart & purchases ────────────────────────────────────────────

async def test_cart_and_checkout_flow(client, accounts):
    asset_id = await _approved_asset_id(client, accounts, price=999)
    buyer = headers(accounts.buyer)

    added = await client.post("/api/cart", json={"assetId": asset_id}, headers=buyer)
    assert added.status_code == 201
    assert added.json()["licenseType"] == "standard"

    total = await client.get("/api/cart/total", headers=buyer)
    assert total.json() == {"itemCount": 1, "total": 999}

    checkout = await client.post("/api/purchases/checkout", headers=buyer)
    assert checkout.status_code == 201
    [purchase] = checkout.json()
    assert purchase["assetId"] == asset_id
    assert purchase["price"] == 999
    assert purchase["downloadUrl"] == "https://cdn.jawastock.test/sunset.jpg"
    assert purchase["expiryDate"] is not None

    assert (await client.get("/api/cart", headers=buyer)).json() == []
    history = await client.get("/api/purchases", headers=buyer)
    assert [p["id"] for p in history.json()] == [purchase["id"]]


async def test_checkout_empty_cart(client, accounts):
    resp = await client.post("/api/purchases/checkout", headers=headers(accounts.buyer))
    assert resp.status_code == 201
    assert resp.json() == []


async def test_remove_cart_item(client, accounts):
    asset_id = await _approved_asset_id(client, accounts)
    buyer = headers(accounts.buyer)
    item = (await client.post("/api/cart", json={"assetId": asset_id}, headers=buyer)).json()

    foreign = await client.delete(f"/api/cart/{item['id']}", headers=headers(accounts.contributor))
    assert foreign.status_code == 403
    assert (await client.delete(f"/api/cart/{item['id']}", headers=buyer)).status_code == 200
    assert (await client.delete(f"/api/cart/{item['id']}", headers=buyer)).status_code == 404


async def test_clear_cart(client, accounts):
    asset_id = await _approved_asset_id(client, accounts)
    buyer = headers(accounts.buyer)
    for _ in range(2):
        await client.post("/api/cart", json={"assetId": asset_id}, headers=buyer)
    resp = await client.delete("/api/cart", headers=buyer)
    assert resp.status_code == 200
    assert "2 item(s)" in resp.json()["message"]


async def test_cart_requires_identity(client):
    assert (await client.get("/api/cart")).status_code == 401


# ─── SQL backend ─────────────────────────────────────────────────

async def test_end_to_end_on_sql_backend(sql_client, test_session_factory):
    async with test_session_factory() as session:
        accounts = await seed_accounts(SqlMarketplaceStore(session))

    asset_id = await _approved_asset_id(sql_client, accounts, price=250)
    buyer = headers(accounts.buyer)
    await sql_client.post("/api/cart", json={"assetId": asset_id}, headers=buyer)
    checkout = await sql_client.post("/api/purchases/checkout", headers=buyer)
    assert checkout.status_code == 201
    assert [p["price"] for p in checkout.json()] == [250]
    assert (await sql_client.get("/api/cart", headers=buyer)).json() == []

    duplicate = await sql_client.post("/api/auth/register", json=user_payload("user_one"))
    assert duplicate.status_code == 409


async def test_browse_with_empty_type_parameter(client, accounts):
    asset_id = await _approved_asset_id(client, accounts)
    resp = await client.get("/api/assets?type=")
    assert resp.status_code == 200
    assert [a["id"] for a in resp.json()] == [asset_id]


async def test_cart_total_route_loads_cart_once(client, accounts, store, monkeypatch):
    asset_id = await _approved_asset_id(client, accounts, price=300)
    buyer = headers(accounts.buyer)
    await client.post("/api/cart", json={"assetId": asset_id}, headers=buyer)

    reads = []
    original = store.cart_items.get_all_by_predicate

    async def counting(predicate):
        reads.append(predicate)
        return await original(predicate)

    monkeypatch.setattr(store.cart_items, "get_all_by_predicate", counting)
    resp = await client.get("/api/cart/total", headers=buyer)
    assert resp.json() == {"itemCount": 1, "total": 300}
    assert len(reads) == 1


async def test_validation_error_field_names_drop_location_prefix(client):
    resp = await client.post("/api/auth/register", json={
        "username": "alice", "email": "alice@jawastock.test", "password": "123",
    })
    assert resp.status_code == 400
    assert [d["field"] for d in resp.json()["error"]["details"]] == ["password"]


async def test_unexpected_error_returns_internal_envelope(store, accounts, monkeypatch):
    async def explode(predicate):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(store.users, "get_all_by_predicate", explode)
    monkeypatch.setattr(app.state, "store", store, raising=False)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        resp = await c.get("/api/users", headers=headers(accounts.admin))
    assert resp.status_code == 500
    body = resp.json()["error"]
    assert body["code"] == "INTERNAL_ERROR"
    assert "disk on fire" not in body["message"]
