"""API tests for /api/v1/gallery."""

import pytest

from conftest import CLOSED_ID, KASKAD_ID, RIVAL_ID, auth
from kaskad.database import hooks

pytestmark = pytest.mark.integration


def new_item(**overrides):
    body = {
        "studio_id": KASKAD_ID,
        "title": "Winter gala",
        "media_url": "https://cdn/gala.jpg",
        "media_type": "photo",
        "tags": ["gala"],
    }
    body.update(overrides)
    return body


def ids(response):
    return [item["id"] for item in response.json()]


# ============================================================================
# Reading
# ============================================================================


def test_anonymous_sees_only_public_items(client, seeded):
    response = client.get("/api/v1/gallery")
    assert response.status_code == 200
    assert ids(response) == ["a-public"]


def test_public_item_readable_without_token(client, seeded):
    assert client.get("/api/v1/gallery/a-public").status_code == 200


def test_private_item_needs_a_token(client, seeded):
    assert client.get("/api/v1/gallery/a-private").status_code == 401


def test_cross_tenant_actor_reads_public_but_not_private(client, seeded):
    assert client.get("/api/v1/gallery/a-public", headers=auth("admin-b")).status_code == 200
    assert client.get("/api/v1/gallery/a-private", headers=auth("admin-b")).status_code == 403


def test_member_lists_public_and_own_studio_newest_first(client, seeded):
    response = client.get("/api/v1/gallery", headers=auth("child-a"))
    assert ids(response) == ["a-private", "a-public"]


def test_other_tenant_lists_own_items_and_public_ones(client, seeded):
    response = client.get("/api/v1/gallery", headers=auth("admin-b"))
    assert ids(response) == ["b-private", "a-public"]


def test_inactive_studio_members_see_only_public_items(client, seeded):
    response = client.get("/api/v1/gallery", headers=auth("admin-c"))
    assert ids(response) == ["a-public"]
    assert client.get("/api/v1/gallery/c-private", headers=auth("admin-c")).status_code == 403


def test_superadmin_has_no_gallery_bypass(client, seeded):
    assert ids(client.get("/api/v1/gallery", headers=auth("super"))) == ["a-public"]


def test_gallery_filters(client, seeded):
    headers = auth("teacher-a")
    assert ids(client.get("/api/v1/gallery?media_type=video", headers=headers)) == ["a-private"]
    assert ids(client.get("/api/v1/gallery?category=rehearsal", headers=headers)) == ["a-private"]
    assert ids(client.get("/api/v1/gallery?tag=spring", headers=headers)) == ["a-public"]
    assert ids(client.get(f"/api/v1/gallery?studio_id={RIVAL_ID}", headers=headers)) == []
    assert ids(client.get("/api/v1/gallery?limit=1", headers=headers)) == ["a-private"]
    assert ids(client.get("/api/v1/gallery?limit=1&offset=1", headers=headers)) == ["a-public"]


def test_missing_item_is_404(client, seeded):
    assert client.get("/api/v1/gallery/nope").status_code == 404


# ============================================================================
# Writing
# ============================================================================


@pytest.mark.parametrize("user_id", ["admin-a", "teacher-a"])
def test_managers_create_items(client, seeded, db, user_id):
    response = client.post("/api/v1/gallery", json=new_item(), headers=auth(user_id))
    assert response.status_code == 201
    body = response.json()
    assert body["created_by"] == user_id
    assert body["likes_count"] == 0
    assert body["is_public"] is False
    assert db.find("gallery_items", body["id"])["studio_id"] == KASKAD_ID


@pytest.mark.parametrize("user_id", ["parent-a", "child-a", "loner", "super"])
def test_non_managers_cannot_create_items(client, seeded, user_id):
    assert client.post("/api/v1/gallery", json=new_item(), headers=auth(user_id)).status_code == 403


def test_anonymous_cannot_create_items(client, seeded):
    assert client.post("/api/v1/gallery", json=new_item()).status_code == 401


def test_manager_cannot_create_in_other_studio(client, seeded):
    response = client.post("/api/v1/gallery", json=new_item(studio_id=RIVAL_ID), headers=auth("admin-a"))
    assert response.status_code == 403


def test_manager_of_inactive_studio_cannot_create(client, seeded):
    response = client.post("/api/v1/gallery", json=new_item(studio_id=CLOSED_ID), headers=auth("admin-c"))
    assert response.status_code == 403


@pytest.mark.parametrize("media_type", ["audio", "PHOTO", "gif", ""])
def test_media_type_outside_enumeration_is_rejected(client, seeded, media_type):
    response = client.post("/api/v1/gallery", json=new_item(media_type=media_type), headers=auth("admin-a"))
    assert response.status_code == 422


def test_update_item(client, seeded, db):
    response = client.put(
        "/api/v1/gallery/a-private",
        json={"is_public": True, "title": None, "tags": ["practice", "open"]},
        headers=auth("teacher-a"),
    )
    assert response.status_code == 200
    stored = db.find("gallery_items", "a-private")
    assert stored["is_public"] is True
    assert stored["title"] == "Rehearsal"
    assert stored["tags"] == ["practice", "open"]
    assert hooks.parse_timestamp(stored["updated_at"]) > hooks.parse_timestamp("2024-03-02T10:00:00+00:00")


def test_update_rejects_bad_media_type(client, seeded):
    response = client.put("/api/v1/gallery/a-private", json={"media_type": "audio"}, headers=auth("teacher-a"))
    assert response.status_code == 422


def test_parent_cannot_update_item(client, seeded):
    assert client.put("/api/v1/gallery/a-public", json={"title": "x"}, headers=auth("parent-a")).status_code == 403


def test_cannot_move_item_to_studio_without_rights(client, seeded, db):
    response = client.put("/api/v1/gallery/a-public", json={"studio_id": RIVAL_ID}, headers=auth("admin-a"))
    assert response.status_code == 403
    assert db.find("gallery_items", "a-public")["studio_id"] == KASKAD_ID


def test_like_item(client, seeded, db):
    response = client.post("/api/v1/gallery/a-public/like", headers=auth("teacher-a"))
    assert response.status_code == 200
    assert response.json()["likes_count"] == 1
    client.post("/api/v1/gallery/a-public/like", headers=auth("admin-a"))
    assert db.find("gallery_items", "a-public")["likes_count"] == 2


def test_child_cannot_like(client, seeded):
    assert client.post("/api/v1/gallery/a-public/like", headers=auth("child-a")).status_code == 403


def test_delete_item(client, seeded, db):
    assert client.delete("/api/v1/gallery/a-private", headers=auth("admin-a")).status_code == 204
    assert db.find("gallery_items", "a-private") is None


def test_cross_tenant_admin_cannot_delete(client, seeded, db):
    assert client.delete("/api/v1/gallery/a-public", headers=auth("admin-b")).status_code == 403
    assert db.find("gallery_items", "a-public") is not None


@pytest.mark.parametrize("method, path, body", [
    ("put", "/api/v1/gallery/a-public", {"title": "Spring show, final cut"}),
    ("post", "/api/v1/gallery/a-public/like", None),
])
def test_writes_move_updated_at_forward_on_stalled_clock(client, seeded, db, monkeypatch, method, path, body):
    before = db.find("gallery_items", "a-public")["updated_at"]
    monkeypatch.setattr(hooks, "utcnow", lambda: hooks.parse_timestamp(before))

    kwargs = {"headers": auth("teacher-a")}
    if body is not None:
        kwargs["json"] = body
    response = getattr(client, method)(path, **kwargs)

    assert response.status_code == 200
    returned = hooks.parse_timestamp(response.json()["updated_at"])
    assert returned > hooks.parse_timestamp(before)
    assert hooks.parse_timestamp(db.find("gallery_items", "a-public")["updated_at"]) == returned
