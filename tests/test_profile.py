"""
LinkedIn Profile Tests

Current-profile semantics and section item edits, at the service level and
through /api/linkedin.
"""

import pytest

from src.database.models import LinkedinProfile
from src.database.repository import DocumentRepository
from src.services.errors import NotFoundError, ValidationError
from src.services.profile_service import ProfileService


@pytest.fixture
def profile_service(db_session, fake_cache):
    return ProfileService(DocumentRepository(db_session, LinkedinProfile), fake_cache)


# =============================================================================
# SERVICE
# =============================================================================

@pytest.mark.asyncio
class TestProfileService:

    async def test_no_profile(self, profile_service):
        with pytest.raises(NotFoundError, match="LinkedIn profile not found"):
            await profile_service.get_current()

    async def test_upsert_creates_then_merges(self, profile_service):
        created = await profile_service.upsert({"profile": {"name": "Ada"}, "skills": [{"name": "Python"}]})

        assert created["profile"] == {"name": "Ada"}
        assert created["experience"] == []
        assert created["skills"][0]["id"]

        merged = await profile_service.upsert({"profile": {"name": "Ada L."}})

        assert merged["id"] == created["id"]
        assert merged["profile"] == {"name": "Ada L."}
        assert merged["skills"] == created["skills"]
        assert profile_service.repository.count() == 1

    async def test_get_current_is_cached(self, profile_service, fake_cache):
        await profile_service.upsert({"profile": {"name": "Ada"}})

        first = await profile_service.get_current()

        assert fake_cache.store["linkedin:profile"] == first

        await profile_service.upsert({"profile": {"name": "Grace"}})
        assert "linkedin:profile" not in fake_cache.store
        assert (await profile_service.get_current())["profile"] == {"name": "Grace"}

    async def test_unknown_fields_ignored(self, profile_service):
        created = await profile_service.upsert({"profile": {}, "hobbies": ["chess"]})
        assert "hobbies" not in created

    async def test_section_must_be_list(self, profile_service):
        with pytest.raises(ValidationError, match="experience must be a list"):
            await profile_service.upsert({"experience": "ten years"})

    async def test_update_by_id(self, profile_service):
        created = await profile_service.upsert({"profile": {"name": "Ada"}})

        updated = await profile_service.update(created["id"], {"achievements": ["Award"]})

        assert updated["achievements"] == ["Award"]
        assert updated["profile"] == {"name": "Ada"}

    async def test_update_unknown_id(self, profile_service):
        with pytest.raises(NotFoundError, match="Profile not found"):
            await profile_service.update("missing", {})

    async def test_section_items(self, profile_service):
        profile = await profile_service.upsert({"profile": {"name": "Ada"}})

        added = await profile_service.add_item(profile["id"], "experience", {"company": "Acme", "role": "Dev"})
        item = added["experience"][0]
        assert item["company"] == "Acme"
        assert item["id"]

        updated = await profile_service.update_item(profile["id"], "experience", item["id"], {"role": "Lead", "id": "x"})
        assert updated["experience"][0] == {**item, "role": "Lead"}

        removed = await profile_service.remove_item(profile["id"], "experience", item["id"])
        assert removed["experience"] == []

    async def test_unknown_item(self, profile_service):
        profile = await profile_service.upsert({"profile": {}})

        with pytest.raises(NotFoundError, match="Skill not found"):
            await profile_service.update_item(profile["id"], "skills", "nope", {"name": "Go"})
        with pytest.raises(NotFoundError, match="Education not found"):
            await profile_service.remove_item(profile["id"], "education", "nope")

    async def test_unknown_section(self, profile_service):
        profile = await profile_service.upsert({"profile": {}})

        with pytest.raises(NotFoundError, match="Section hobbies not found"):
            await profile_service.add_item(profile["id"], "hobbies", {"name": "chess"})

    async def test_delete(self, profile_service):
        profile = await profile_service.upsert({"profile": {}})

        result = await profile_service.delete(profile["id"])

        assert result == {"message": "LinkedIn profile deleted successfully"}
        with pytest.raises(NotFoundError):
            await profile_service.get_current()


# =============================================================================
# HTTP
# =============================================================================

class TestProfileEndpoints:

    def test_get_without_profile(self, client):
        response = client.get("/api/linkedin")

        assert response.status_code == 404
        assert response.json() == {"error": "LinkedIn profile not found"}

    def test_profile_lifecycle(self, client, auth_headers):
        created = client.post(
            "/api/linkedin",
            json={"profile": {"name": "Ada", "headline": "Engineer"}},
            headers=auth_headers,
        )
        assert created.status_code == 200
        profile_id = created.json()["id"]

        added = client.post(
            f"/api/linkedin/{profile_id}/certifications",
            json={"name": "CKA", "issuer": "CNCF"},
            headers=auth_headers,
        ).json()
        cert_id = added["certifications"][0]["id"]

        client.put(
            f"/api/linkedin/{profile_id}/certifications/{cert_id}",
            json={"issuer": "Linux Foundation"},
            headers=auth_headers,
        )

        current = client.get("/api/linkedin").json()
        assert current["profile"]["headline"] == "Engineer"
        assert current["certifications"][0]["issuer"] == "Linux Foundation"

        missing = client.delete(f"/api/linkedin/{profile_id}/certifications/nope", headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json() == {"error": "Certification not found"}

        deleted = client.delete(f"/api/linkedin/{profile_id}", headers=auth_headers)
        assert deleted.json() == {"message": "LinkedIn profile deleted successfully"}

    def test_section_edit_requires_token(self, client):
        response = client.post("/api/linkedin/abc/skills", json={"name": "Go"})
        assert response.status_code == 401
