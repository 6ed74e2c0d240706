from fastapi.testclient import TestClient

from storefront.catalog_service.main import app

client = TestClient(app)


def test_get_artwork():
    resp = client.get("/artworks/art-2")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["artwork"]["price"] == 145.5
    assert body["artwork"]["artisanUserId"] == "artisan-2"


def test_unknown_artwork():
    resp = client.get("/artworks/art-404")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Artwork not found"}


def test_list_by_category():
    all_ids = {a["id"] for a in client.get("/artworks").json()["artworks"]}
    ceramics = client.get("/artworks", params={"category": "ceramics"}).json()["artworks"]

    assert all_ids == {"art-1", "art-2", "art-3"}
    assert [a["id"] for a in ceramics] == ["art-1"]
