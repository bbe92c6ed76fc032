import pytest

from app.features.phones.models.phone import Phone
from app.features.phones.schemas.phone import normalize_number


@pytest.fixture
async def admin_headers(make_user, auth_headers):
    admin = await make_user(email="admin@example.com", is_admin=True)
    return auth_headers(admin)


async def _create(client, headers, **overrides):
    body = {"label": "Front desk", "number": "+234 (801) 234-5678", "phone_type": "landline"}
    body.update(overrides)
    return await client.post("/api/v1/phones", json=body, headers=headers)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("+234 (801) 234-5678", "+2348012345678"),
        ("0801.234.5678", "08012345678"),
        ("  112 ", "112"),
    ],
)
def test_normalize_number(raw, expected):
    assert normalize_number(raw) == expected


@pytest.mark.parametrize("raw", ["12", "call me", "++2348012345678", "+234-801-ABC"])
def test_normalize_number_rejects_garbage(raw):
    with pytest.raises(ValueError):
        normalize_number(raw)


class TestPhoneAccess:

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client):
        response = await client.get("/api/v1/phones")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_requires_admin(self, client, make_user, auth_headers):
        user = await make_user(email="member@example.com")

        response = await client.get("/api/v1/phones", headers=auth_headers(user))

        assert response.status_code == 403
        assert response.json()["message"] == "Admin access required"


class TestPhoneCrud:

    @pytest.mark.asyncio
    async def test_create_and_get(self, client, admin_headers):
        response = await _create(client, admin_headers)

        assert response.status_code == 201
        created = response.json()["data"]
        assert created["number"] == "+2348012345678"
        assert created["phone_type"] == "landline"
        assert created["is_active"] is True

        fetched = await client.get(f"/api/v1/phones/{created['id']}", headers=admin_headers)
        assert fetched.status_code == 200
        assert fetched.json()["data"]["label"] == "Front desk"

    @pytest.mark.asyncio
    async def test_duplicate_number_conflicts(self, client, admin_headers, count_rows):
        await _create(client, admin_headers)

        response = await _create(client, admin_headers, label="Other", number="+2348012345678")

        assert response.status_code == 409
        assert await count_rows(Phone) == 1

    @pytest.mark.asyncio
    async def test_invalid_number_is_422(self, client, admin_headers):
        response = await _create(client, admin_headers, number="nope")

        assert response.status_code == 422
        assert response.json()["message"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_list_with_search_and_filter(self, client, admin_headers):
        await _create(client, admin_headers, label="Front desk", number="111111")
        await _create(client, admin_headers, label="Kitchen", number="222222")
        await _create(client, admin_headers, label="Old fax", number="333333", is_active=False)

        everything = (await client.get("/api/v1/phones", headers=admin_headers)).json()["data"]
        assert everything["total"] == 3
        assert [p["label"] for p in everything["items"]] == ["Front desk", "Kitchen", "Old fax"]

        searched = await client.get("/api/v1/phones", params={"search": "kitch"}, headers=admin_headers)
        assert [p["label"] for p in searched.json()["data"]["items"]] == ["Kitchen"]

        active = await client.get("/api/v1/phones", params={"is_active": "false"}, headers=admin_headers)
        assert active.json()["data"]["total"] == 1

        paged = await client.get("/api/v1/phones", params={"skip": 1, "limit": 1}, headers=admin_headers)
        data = paged.json()["data"]
        assert data["total"] == 3
        assert [p["label"] for p in data["items"]] == ["Kitchen"]

    @pytest.mark.asyncio
    async def test_partial_update(self, client, admin_headers):
        phone_id = (await _create(client, admin_headers)).json()["data"]["id"]

        response = await client.patch(
            f"/api/v1/phones/{phone_id}", json={"location": "Lobby"}, headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["location"] == "Lobby"
        assert data["label"] == "Front desk"

    @pytest.mark.asyncio
    async def test_update_to_taken_number_conflicts(self, client, admin_headers):
        await _create(client, admin_headers, number="111111")
        second = (await _create(client, admin_headers, number="222222")).json()["data"]

        response = await client.patch(
            f"/api/v1/phones/{second['id']}", json={"number": "111 111"}, headers=admin_headers
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete(self, client, admin_headers, count_rows):
        phone_id = (await _create(client, admin_headers)).json()["data"]["id"]

        response = await client.delete(f"/api/v1/phones/{phone_id}", headers=admin_headers)

        assert response.status_code == 200
        assert await count_rows(Phone) == 0
        missing = await client.get(f"/api/v1/phones/{phone_id}", headers=admin_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["label", "number", "phone_type", "is_active"])
    async def test_null_on_required_field_is_422(self, client, admin_headers, field):
        phone_id = (await _create(client, admin_headers)).json()["data"]["id"]

        response = await client.patch(
            f"/api/v1/phones/{phone_id}", json={field: None}, headers=admin_headers
        )

        assert response.status_code == 422
        unchanged = (await client.get(f"/api/v1/phones/{phone_id}", headers=admin_headers)).json()["data"]
        assert unchanged["label"] == "Front desk"
        assert unchanged["number"] == "+2348012345678"

    @pytest.mark.asyncio
    async def test_null_clears_optional_field(self, client, admin_headers):
        phone_id = (await _create(client, admin_headers, location="Lobby")).json()["data"]["id"]

        response = await client.patch(
            f"/api/v1/phones/{phone_id}", json={"location": None}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["location"] is None

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, client, admin_headers):
        await _create(client, admin_headers, label="Front desk", number="111111")
        await _create(client, admin_headers, label="Ext_2 line", number="222222")
        await _create(client, admin_headers, label="100% uptime", number="333333")

        underscore = await client.get("/api/v1/phones", params={"search": "_"}, headers=admin_headers)
        assert [p["label"] for p in underscore.json()["data"]["items"]] == ["Ext_2 line"]

        percent = await client.get("/api/v1/phones", params={"search": "%"}, headers=admin_headers)
        assert [p["label"] for p in percent.json()["data"]["items"]] == ["100% uptime"]
