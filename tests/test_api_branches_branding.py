from sqlalchemy.ext.asyncio import async_sessionmaker

from tabletmenu.database import seed_defaults
from tabletmenu.main import settings


async def test_health(http):
    r = await http.get("/api/health")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["status"] == "ok"
    assert body["database"] == "healthy"
    assert body["credential_backend"] == "static"


async def test_branch_crud(http, create):
    branch = await create("/api/branches", {
        "name": "Markaziy Filial",
        "address": "Amir Temur ko'chasi, 10-uy",
        "phone": "+998 99 987 65 43",
        "custom_color": "#DC2626",
    })
    assert branch["custom_color"] == "#DC2626"

    r = await http.put(f"/api/branches/{branch['id']}", json={"phone": "+998 71 000 00 00"})
    assert r.status_code == 200, r.text
    assert r.json()["phone"] == "+998 71 000 00 00"
    assert r.json()["name"] == "Markaziy Filial"

    r = await http.put(f"/api/branches/{branch['id']}", json={"custom_color": None, "name": None})
    assert r.json()["custom_color"] is None
    assert r.json()["name"] == "Markaziy Filial"

    assert (await http.delete(f"/api/branches/{branch['id']}")).status_code == 204
    assert (await http.get("/api/branches")).json() == []


async def test_missing_branch_is_404(http):
    r = await http.put("/api/branches/9", json={"name": "Ghost"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Branch #9 not found"


async def test_branding_created_on_first_read(http):
    r = await http.get("/api/branding")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["restaurant_name"] == settings.default_restaurant_name
    assert body["primary_color"] == "#F97316"
    assert body["background_image_url"] is None


async def test_branding_update_merges(http):
    r = await http.put("/api/branding", json={"restaurant_name": "Lazzat", "primary_color": "#000000"})
    assert r.status_code == 200, r.text

    r = await http.put("/api/branding", json={"card_color": "#EEEEEE", "restaurant_name": None})
    body = r.json()
    assert body["restaurant_name"] == "Lazzat"
    assert body["primary_color"] == "#000000"
    assert body["card_color"] == "#EEEEEE"


async def test_branding_header_image_can_be_cleared(http):
    await http.put("/api/branding", json={"header_image_url": "https://img/header.jpg"})
    r = await http.put("/api/branding", json={"header_image_url": None})
    assert r.json()["header_image_url"] is None


async def test_seed_defaults_runs_once(http, engine):
    session_maker = async_sessionmaker(engine, expire_on_commit=False)
    for _ in range(2):
        async with session_maker() as session:
            await seed_defaults(session)

    branches = (await http.get("/api/branches")).json()
    assert [b["name"] for b in branches] == [settings.default_branch_name]
    assert (await http.get("/api/branding")).json()["restaurant_name"] == settings.default_restaurant_name
