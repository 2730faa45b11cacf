"""
Folio Backend — Project Endpoint Tests
========================================

What:  Public reads, admin-only create, owner-or-admin update/delete,
       slug handling, category filtering, and image upload.
"""

import uuid

import pytest

pytestmark = pytest.mark.asyncio


async def create_project(client, account, payload, **overrides):
    body = {**payload, **overrides}
    response = await client.post("/api/projects", json=body, headers=account.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def make_owned_by(db_session, project_id, user):
    """Reassign a project so ownership rules can be exercised with an editor."""
    from app.models.project import Project

    project = await db_session.get(Project, uuid.UUID(project_id))
    project.created_by = user.id
    await db_session.commit()


class TestPublicReads:
    async def test_list_without_auth(self, test_client, admin, project_payload):
        await create_project(test_client, admin, project_payload)
        await create_project(test_client, admin, project_payload, title="Second One")

        response = await test_client.get("/api/projects")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 2
        # Newest first
        assert [p["title"] for p in body["data"]] == ["Second One", "Vision Ops Platform"]

    async def test_empty_list(self, test_client):
        response = await test_client.get("/api/projects")
        assert response.json() == {"success": True, "count": 0, "data": []}

    async def test_get_by_slug_and_id(self, test_client, admin, project_payload):
        created = await create_project(test_client, admin, project_payload)

        by_slug = await test_client.get("/api/projects/vision-ops-platform")
        by_id = await test_client.get(f"/api/projects/{created['id']}")

        assert by_slug.status_code == by_id.status_code == 200
        assert by_slug.json()["data"]["id"] == by_id.json()["data"]["id"] == created["id"]

    async def test_unknown_slug_and_id(self, test_client):
        missing_slug = await test_client.get("/api/projects/no-such-project")
        missing_id = await test_client.get(f"/api/projects/{uuid.uuid4()}")

        assert missing_slug.status_code == missing_id.status_code == 404
        assert missing_slug.json()["success"] is False

    async def test_featured_is_subset(self, test_client, admin, project_payload):
        await create_project(test_client, admin, project_payload, title="Shown", featured=True)
        await create_project(test_client, admin, project_payload, title="Hidden", featured=False)

        response = await test_client.get("/api/projects/featured")

        assert [p["title"] for p in response.json()["data"]] == ["Shown"]

    async def test_filter_by_category(self, test_client, admin, project_payload):
        await create_project(test_client, admin, project_payload, title="Ml", categories=["AI"])
        await create_project(test_client, admin, project_payload, title="Design", categories=["UI/UX"])

        ai = await test_client.get("/api/projects/category/AI")
        design = await test_client.get("/api/projects/category/UI/UX")

        assert [p["title"] for p in ai.json()["data"]] == ["Ml"]
        assert [p["title"] for p in design.json()["data"]] == ["Design"]

    async def test_list_with_category_query(self, test_client, admin, project_payload):
        await create_project(test_client, admin, project_payload, title="App", categories=["Mobile"])
        await create_project(test_client, admin, project_payload, title="Site", categories=["Web"])

        response = await test_client.get("/api/projects", params={"category": "Mobile"})

        assert response.status_code == 200
        assert [p["title"] for p in response.json()["data"]] == ["App"]

    async def test_unknown_category(self, test_client):
        response = await test_client.get("/api/projects/category/Blockchain")

        assert response.status_code == 400
        assert "Unknown category" in response.json()["error"]


class TestCreate:
    async def test_create_sets_owner_and_slug(self, test_client, admin, project_payload):
        created = await create_project(test_client, admin, project_payload, title="AI & Ops: v2!")

        assert created["slug"] == "ai-ops-v2"
        assert created["createdBy"] == str(admin.user.id)
        assert created["testimonial"]["author"] == "Dana Smith"

    async def test_create_requires_auth(self, test_client, project_payload):
        response = await test_client.post("/api/projects", json=project_payload)
        assert response.status_code == 401

    async def test_create_requires_admin(self, test_client, editor, project_payload):
        response = await test_client.post("/api/projects", json=project_payload, headers=editor.headers)
        assert response.status_code == 403

    async def test_duplicate_slug(self, test_client, admin, project_payload):
        await create_project(test_client, admin, project_payload)
        response = await test_client.post(
            "/api/projects",
            json={**project_payload, "title": "Vision  Ops  Platform!"},
            headers=admin.headers,
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Duplicate field value entered: slug"}

    async def test_invalid_payload(self, test_client, admin, project_payload):
        response = await test_client.post(
            "/api/projects",
            json={**project_payload, "categories": ["Blockchain"]},
            headers=admin.headers,
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("categories")

    async def test_markup_in_title_does_not_reach_slug(
        self, test_client, admin, db_session, project_payload
    ):
        from app.models.project import Project

        created = await create_project(test_client, admin, project_payload, title="Apps > Web")

        assert created["slug"] == "apps-web"
        assert created["title"] == "Apps &gt; Web"
        stored = await db_session.get(Project, uuid.UUID(created["id"]))
        assert stored.title == "Apps > Web"

    async def test_title_at_limit_with_markup(self, test_client, admin, project_payload):
        title = "a<b " + "x" * 96

        created = await create_project(test_client, admin, project_payload, title=title)

        assert created["slug"] == "ab-" + "x" * 96

    async def test_markup_is_escaped(self, test_client, admin, project_payload):
        created = await create_project(
            test_client, admin, project_payload, description="<img src=x onerror=alert(1)>"
        )
        assert created["description"] == "&lt;img src=x onerror=alert(1)&gt;"


class TestUpdate:
    async def test_admin_update_reslugs(self, test_client, admin, project_payload):
        created = await create_project(test_client, admin, project_payload)

        response = await test_client.put(
            f"/api/projects/{created['id']}",
            json={"title": "Vision Ops Platform 2"},
            headers=admin.headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["slug"] == "vision-ops-platform-2"
        assert data["client"] == "Acme Robotics"
        old_slug = await test_client.get("/api/projects/vision-ops-platform")
        assert old_slug.status_code == 404

    async def test_owner_may_update(self, test_client, admin, editor, db_session, project_payload):
        created = await create_project(test_client, admin, project_payload)
        await make_owned_by(db_session, created["id"], editor.user)

        response = await test_client.put(
            f"/api/projects/{created['id']}",
            json={"featured": False},
            headers=editor.headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["featured"] is False

    async def test_non_owner_editor_forbidden(self, test_client, admin, editor, project_payload):
        created = await create_project(test_client, admin, project_payload)

        response = await test_client.put(
            f"/api/projects/{created['id']}",
            json={"title": "Hijacked"},
            headers=editor.headers,
        )

        assert response.status_code == 403
        unchanged = await test_client.get(f"/api/projects/{created['id']}")
        assert unchanged.json()["data"]["title"] == "Vision Ops Platform"

    async def test_update_requires_auth(self, test_client, admin, project_payload):
        created = await create_project(test_client, admin, project_payload)
        test_client.cookies.clear()

        response = await test_client.put(f"/api/projects/{created['id']}", json={"title": "x"})
        assert response.status_code == 401

    async def test_update_unknown_and_malformed_id(self, test_client, admin):
        unknown = await test_client.put(
            f"/api/projects/{uuid.uuid4()}", json={"title": "x"}, headers=admin.headers
        )
        malformed = await test_client.put(
            "/api/projects/not-an-id", json={"title": "x"}, headers=admin.headers
        )

        assert unknown.status_code == malformed.status_code == 404

    async def test_update_into_existing_slug(self, test_client, admin, project_payload):
        await create_project(test_client, admin, project_payload, title="Taken")
        other = await create_project(test_client, admin, project_payload, title="Free")

        response = await test_client.put(
            f"/api/projects/{other['id']}", json={"title": "taken"}, headers=admin.headers
        )

        assert response.status_code == 400
        assert "slug" in response.json()["error"]

    async def test_null_required_field(self, test_client, admin, project_payload):
        created = await create_project(test_client, admin, project_payload)
        response = await test_client.put(
            f"/api/projects/{created['id']}", json={"title": None}, headers=admin.headers
        )

        assert response.status_code == 400


class TestDelete:
    async def test_delete_without_credentials(self, test_client, admin, project_payload):
        created = await create_project(test_client, admin, project_payload)

        response = await test_client.delete(f"/api/projects/{created['id']}")

        assert response.status_code == 401
        still_there = await test_client.get(f"/api/projects/{created['id']}")
        assert still_there.status_code == 200

    async def test_non_owner_editor_forbidden(self, test_client, admin, editor, project_payload):
        created = await create_project(test_client, admin, project_payload)

        response = await test_client.delete(f"/api/projects/{created['id']}", headers=editor.headers)
        assert response.status_code == 403

    async def test_owner_deletes(self, test_client, admin, editor, db_session, project_payload):
        created = await create_project(test_client, admin, project_payload)
        await make_owned_by(db_session, created["id"], editor.user)

        response = await test_client.delete(f"/api/projects/{created['id']}", headers=editor.headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": {}}
        gone = await test_client.get(f"/api/projects/{created['id']}")
        assert gone.status_code == 404

    async def test_delete_unknown(self, test_client, admin):
        response = await test_client.delete(f"/api/projects/{uuid.uuid4()}", headers=admin.headers)
        assert response.status_code == 404


class TestUpload:
    async def test_upload_image(self, test_client, context, admin, sample_image_bytes):
        response = await test_client.post(
            "/api/projects/upload",
            files={"image": ("cover.jpg", sample_image_bytes, "image/jpeg")},
            headers=admin.headers,
        )

        assert response.status_code == 201
        path = response.json()["data"]["path"]
        assert path.startswith("/uploads/") and path.endswith(".jpg")
        stored = context.files.storage_root / path[len("/uploads/"):]
        assert stored.read_bytes() == sample_image_bytes

    async def test_upload_rejects_non_image(self, test_client, admin):
        response = await test_client.post(
            "/api/projects/upload",
            files={"image": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
            headers=admin.headers,
        )

        assert response.status_code == 400
        assert "not supported" in response.json()["error"]

    async def test_upload_too_large(self, test_client, context, admin):
        context.files.max_size = 1024
        response = await test_client.post(
            "/api/projects/upload",
            files={"image": ("big.png", b"x" * 2048, "image/png")},
            headers=admin.headers,
        )

        assert response.status_code == 400
        assert "too large" in response.json()["error"]

    async def test_upload_read_stops_past_limit(self, test_client, context, admin, monkeypatch):
        from starlette.datastructures import UploadFile

        requested = []
        original_read = UploadFile.read

        async def recording_read(self, size=-1):
            requested.append(size)
            return await original_read(self, size)

        monkeypatch.setattr(UploadFile, "read", recording_read)
        context.files.max_size = 1024

        response = await test_client.post(
            "/api/projects/upload",
            files={"image": ("huge.png", b"x" * 8192, "image/png")},
            headers=admin.headers,
        )

        assert response.status_code == 400
        assert requested and all(size == 1025 for size in requested)

    async def test_upload_requires_admin(self, test_client, editor, sample_image_bytes):
        response = await test_client.post(
            "/api/projects/upload",
            files={"image": ("cover.jpg", sample_image_bytes, "image/jpeg")},
            headers=editor.headers,
        )
        assert response.status_code == 403
