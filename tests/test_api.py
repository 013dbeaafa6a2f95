"""
API Tests

End-to-end checks through the FastAPI app with the store, cache and media
host replaced by in-memory fakes.
"""

import pytest
from fastapi.testclient import TestClient


JOURNEY_STEP = {
    "year": "2019",
    "title": "Graduated",
    "description": "BSc Computer Science",
    "icon": "graduation-cap",
    "color": "#3366ff",
}

ODOO_MODULE = {
    "name": "Inventory Plus",
    "category": "Inventory",
    "version": "17.0",
    "description": "Barcode flows",
    "status": "live",
}


# =============================================================================
# JOURNEY SCENARIO
# =============================================================================

class TestJourney:

    def test_create_list_reorder(self, client, auth_headers, fake_cache):
        created = client.post("/api/journey", json=JOURNEY_STEP, headers=auth_headers)
        assert created.status_code == 201
        step = created.json()
        assert step["order"] == 0

        listed = client.get("/api/journey")
        assert listed.status_code == 200
        assert [s["id"] for s in listed.json()] == [step["id"]]
        assert "journey:all" in fake_cache.store

        reordered = client.put(
            "/api/journey/reorder",
            json={"steps": [{"id": step["id"], "order": 5}]},
            headers=auth_headers,
        )
        assert reordered.status_code == 200
        assert reordered.json()[0]["order"] == 5

        assert client.get("/api/journey").json()[0]["order"] == 5

    def test_reorder_requires_steps(self, client, auth_headers):
        response = client.put("/api/journey/reorder", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Steps array is required"}

    def test_missing_fields(self, client, auth_headers):
        response = client.post("/api/journey", json={"year": "2020"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Year, title, description, icon, and color are required"}

    def test_invalid_json_body(self, client, auth_headers):
        response = client.post(
            "/api/journey",
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON body"}

    def test_update_and_delete(self, client, auth_headers):
        step = client.post("/api/journey", json=JOURNEY_STEP, headers=auth_headers).json()

        updated = client.put(f"/api/journey/{step['id']}", json={"title": "Masters"}, headers=auth_headers)
        assert updated.json()["title"] == "Masters"
        assert updated.json()["year"] == "2019"

        deleted = client.delete(f"/api/journey/{step['id']}", headers=auth_headers)
        assert deleted.json() == {"message": "Journey step deleted successfully"}

        missing = client.get(f"/api/journey/{step['id']}")
        assert missing.status_code == 404
        assert missing.json() == {"error": "Journey step not found"}


# =============================================================================
# AUTH GATES
# =============================================================================

class TestGates:

    @pytest.mark.parametrize("method,path", [
        ("post", "/api/certificates"),
        ("put", "/api/images/abc"),
        ("delete", "/api/odoo/abc"),
        ("put", "/api/landing-pages/abc/toggle-featured"),
        ("put", "/api/journey/reorder"),
        ("post", "/api/linkedin"),
    ])
    def test_mutations_require_token(self, client, method, path):
        response = client.request(method.upper(), path, json={})

        assert response.status_code == 401
        assert "error" in response.json()

    def test_mutation_rejects_garbage_token(self, client):
        response = client.post(
            "/api/journey",
            json=JOURNEY_STEP,
            headers={"Authorization": "Bearer garbage"},
        )
        assert response.status_code == 401

    def test_optional_auth_does_not_change_list(self, client, auth_headers):
        client.post("/api/journey", json=JOURNEY_STEP, headers=auth_headers)

        anonymous = client.get("/api/journey").json()
        garbage = client.get("/api/journey", headers={"Authorization": "Bearer garbage"}).json()
        admin = client.get("/api/journey", headers=auth_headers).json()

        assert anonymous == garbage == admin
        assert len(anonymous) == 1


# =============================================================================
# ERRORS
# =============================================================================

class TestErrors:

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"error": "Route not found"}

    def test_unknown_id(self, client):
        response = client.get("/api/odoo/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "Odoo module not found"}

    def _explode(self, session_factory, fake_cache, fake_media, monkeypatch):
        from api.main import app
        from src.services.resource_service import ResourceService
        from src.database.session import get_db
        from api.dependencies import get_cache, get_media

        async def explode(self, query=None):
            raise RuntimeError("store offline")

        monkeypatch.setattr(ResourceService, "list", explode)
        app.dependency_overrides[get_db] = lambda: session_factory()
        app.dependency_overrides[get_cache] = lambda: fake_cache
        app.dependency_overrides[get_media] = lambda: fake_media
        try:
            return TestClient(app, raise_server_exceptions=False).get("/api/images")
        finally:
            app.dependency_overrides.clear()

    def test_unhandled_error_is_500_with_detail(self, session_factory, fake_cache, fake_media, monkeypatch):
        response = self._explode(session_factory, fake_cache, fake_media, monkeypatch)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error", "message": "store offline"}

    def test_unhandled_error_hides_detail_in_production(self, session_factory, fake_cache, fake_media, monkeypatch):
        from src.utils.config import Settings

        monkeypatch.setattr("api.main.get_settings", lambda: Settings(ENVIRONMENT="production"))
        response = self._explode(session_factory, fake_cache, fake_media, monkeypatch)

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error", "message": "Something went wrong"}


# =============================================================================
# UPLOADS
# =============================================================================

class TestUploads:

    def test_multipart_create_with_image(self, client, auth_headers, fake_media):
        response = client.post(
            "/api/images",
            data={"title": "Harbour", "description": "Dawn", "station": "port"},
            files={"image": ("harbour.jpg", b"\xff\xd8\xff" + b"0" * 32, "image/jpeg")},
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["src"] == fake_media.uploads[0].url
        assert body["media"]["externalId"] == fake_media.uploads[0].external_id

    def test_multipart_rejects_non_image(self, client, auth_headers, fake_media):
        response = client.post(
            "/api/images",
            data={"title": "Notes", "description": "x", "station": "port"},
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Only image files are allowed"}
        assert fake_media.uploads == []

    def test_multipart_screenshots(self, client, auth_headers, fake_media):
        response = client.post(
            "/api/odoo",
            data={**ODOO_MODULE, "features": '["scan", "print"]', "clientsUsing": "3"},
            files=[
                ("screenshots", ("one.png", b"\x89PNG1", "image/png")),
                ("screenshots", ("two.png", b"\x89PNG2", "image/png")),
            ],
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["features"] == ["scan", "print"]
        assert body["clientsUsing"] == 3
        assert len(body["screenshots"]) == 2
        assert len(fake_media.uploads) == 2

    def test_certificate_pdf(self, client, auth_headers):
        response = client.post(
            "/api/certificates",
            data={"label": "CKA", "type": "cloud", "base": "cka"},
            files={"file": ("cka.pdf", b"%PDF-1.7", "application/pdf")},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["file"] == "cka.pdf"


# =============================================================================
# RESOURCE-SPECIFIC ROUTES
# =============================================================================

class TestResourceRoutes:

    def test_odoo_stats_categories_clients(self, client, auth_headers):
        first = client.post("/api/odoo", json={**ODOO_MODULE, "clientsUsing": 2}, headers=auth_headers).json()
        client.post("/api/odoo", json={**ODOO_MODULE, "category": "Sales"}, headers=auth_headers)

        assert client.get("/api/odoo/categories").json() == ["Inventory", "Sales"]

        stats = client.get("/api/odoo/stats").json()
        assert stats["totalModules"] == 2
        assert stats["totalClients"] == 2

        updated = client.put(f"/api/odoo/{first['id']}/clients", json={"clientsUsing": 10}, headers=auth_headers)
        assert updated.json()["clientsUsing"] == 10
        assert client.get("/api/odoo/stats").json()["totalClients"] == 10

    def test_odoo_filters(self, client, auth_headers):
        client.post("/api/odoo", json=ODOO_MODULE, headers=auth_headers)
        client.post("/api/odoo", json={**ODOO_MODULE, "status": "beta"}, headers=auth_headers)

        beta = client.get("/api/odoo", params={"status": "beta"}).json()

        assert len(beta) == 1
        assert beta[0]["status"] == "beta"

    def test_image_stations(self, client, auth_headers):
        for station in ("lab", "port", "lab"):
            client.post(
                "/api/images",
                json={"title": "t", "description": "d", "station": station},
                headers=auth_headers,
            )

        assert client.get("/api/images/stations").json() == ["lab", "port"]

    def test_landing_page_toggle(self, client, auth_headers):
        page = client.post(
            "/api/landing-pages",
            json={"title": "Shop", "description": "Storefront"},
            headers=auth_headers,
        ).json()
        assert page["featured"] is False

        toggled = client.put(f"/api/landing-pages/{page['id']}/toggle-featured", headers=auth_headers)
        assert toggled.json()["featured"] is True

        featured = client.get("/api/landing-pages", params={"featured": "true"}).json()
        assert [p["id"] for p in featured] == [page["id"]]

    def test_toggle_unknown_id(self, client, auth_headers):
        response = client.put("/api/personal-info/nope/toggle-featured", headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Personal project not found"}

    def test_personal_info_statuses(self, client, auth_headers):
        for status in ("done", "in-progress"):
            client.post(
                "/api/personal-info",
                json={"title": "p", "description": "d", "status": status},
                headers=auth_headers,
            )

        assert client.get("/api/personal-info/statuses").json() == ["done", "in-progress"]


# =============================================================================
# HEALTH
# =============================================================================

class TestHealth:

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["services"]["database"] == "connected"
        assert body["services"]["cache"] == "connected"
        assert body["services"]["media"] == "available"
        assert "timestamp" in body
