def test_admin_requires_token(client):
    assert client.get("/admin/items/").status_code == 401


def test_admin_rejects_non_admin(client, visitor_headers):
    assert client.get("/admin/items/", headers=visitor_headers).status_code == 403


def test_create_converts_to_embed(client, admin_headers):
    res = client.post(
        "/admin/items/",
        json={
            "media_type": "video",
            "category": "wedding",
            "embed_url": "https://www.youtube.com/watch?v=abc123",
            "title": "  ",
        },
        headers=admin_headers,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["embed_url"] == "https://www.youtube.com/embed/abc123"
    assert body["title"] is None

    listed = client.get("/admin/items/", headers=admin_headers).json()
    assert [i["id"] for i in listed] == [body["id"]]


def test_create_validates(client, admin_headers):
    bad_url = {"media_type": "photo", "category": "wedding", "embed_url": "drive.google.com/x"}
    assert client.post("/admin/items/", json=bad_url, headers=admin_headers).status_code == 422

    bad_category = {"media_type": "photo", "category": "party", "embed_url": "https://x.com/a.jpg"}
    assert client.post("/admin/items/", json=bad_category, headers=admin_headers).status_code == 422


def test_update_item(client, admin_headers, make_item):
    item = make_item()

    res = client.put(
        f"/admin/items/{item.id}",
        json={"embed_url": "https://drive.google.com/open?id=NEWID", "category": "drone"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["embed_url"] == "https://drive.google.com/file/d/NEWID/preview"
    assert body["category"] == "drone"
    assert body["title"] == item.title


def test_update_rejects_clearing_required_fields(client, admin_headers, make_item):
    item = make_item()
    res = client.put(f"/admin/items/{item.id}", json={"embed_url": ""}, headers=admin_headers)
    assert res.status_code == 400


def test_update_rejects_media_type_change(client, admin_headers, make_item):
    item = make_item()

    res = client.put(f"/admin/items/{item.id}", json={"media_type": "video"}, headers=admin_headers)
    assert res.status_code == 400
    assert client.get(f"/portfolio/items/{item.id}").json()["media_type"] == "photo"


def test_update_accepts_unchanged_media_type(client, admin_headers, make_item):
    item = make_item()

    res = client.put(
        f"/admin/items/{item.id}",
        json={"media_type": "photo", "title": "Mehendi"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["media_type"] == "photo"
    assert res.json()["title"] == "Mehendi"


def test_update_missing(client, admin_headers):
    res = client.put("/admin/items/missing", json={"title": "x"}, headers=admin_headers)
    assert res.status_code == 404


def test_delete_item(client, admin_headers, make_item):
    item = make_item()

    res = client.delete(f"/admin/items/{item.id}", headers=admin_headers)
    assert res.status_code == 200
    assert client.get(f"/portfolio/items/{item.id}").status_code == 404
    assert client.delete(f"/admin/items/{item.id}", headers=admin_headers).status_code == 404
