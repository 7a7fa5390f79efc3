"""
Tests for the HTTP endpoints
"""
import pytest
from fastapi import status

from app.models.models import AnalyticsEvent, Business


@pytest.mark.unit
class TestBusinessRegistration:
    """Tests for business registration endpoints"""

    def test_register_business(self, client, business_data, db):
        response = client.post("/api/v1/businesses", json=business_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["slug"] == "abshop"
        assert data["category"] == "Shop"
        assert data["status"] == "pending"
        assert data["email"] == "ab.shop@example.com"
        assert data["user_id"] is None

    def test_register_business_as_user(self, client, business_data, normal_user, owner_headers):
        response = client.post("/api/v1/businesses", json=business_data, headers=owner_headers)
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user_id"] == normal_user.id

    def test_register_missing_description(self, client, business_data):
        business_data["description"] = " "
        response = client.post("/api/v1/businesses", json=business_data)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"detail": "description is required", "field": "description"}

    def test_register_duplicate_email(self, client, business_data, test_business):
        business_data["business_name"] = "Another Shop"
        response = client.post("/api/v1/businesses", json=business_data)
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["field"] == "email"

    def test_content_admin_second_business(self, client, business_data, content_admin_business, content_admin_headers):
        response = client.post("/api/v1/businesses", json=business_data, headers=content_admin_headers)
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["existing_business"]["id"] == content_admin_business.id

    def test_invalid_token(self, client, business_data):
        response = client.post(
            "/api/v1/businesses", json=business_data, headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.unit
class TestSlugCheck:

    def test_available(self, client):
        response = client.get("/api/v1/businesses/check-slug", params={"slug": " newshop "})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"available": True, "slug": "newshop"}

    def test_uppercase_is_invalid(self, client):
        response = client.get("/api/v1/businesses/check-slug", params={"slug": "NewShop"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_taken_with_suggestions(self, client, test_business):
        response = client.get("/api/v1/businesses/check-slug", params={"slug": "abshop"})
        assert response.json() == {
            "available": False,
            "slug": "abshop",
            "suggestions": ["abshop1", "abshop2", "abshop3"],
        }

    def test_invalid_format(self, client):
        response = client.get("/api/v1/businesses/check-slug", params={"slug": "a-b"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["field"] == "slug"


@pytest.mark.unit
class TestBusinessUpdate:
    """Tests for business update endpoint"""

    def test_owner_update(self, client, test_business, owner_headers):
        response = client.put(
            f"/api/v1/businesses/{test_business.id}",
            headers=owner_headers,
            json={"description": "Now open on Sundays."}
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["requires_approval"] is False
        assert data["business"]["description"] == "Now open on Sundays."

    def test_content_admin_update_needs_approval(self, client, content_admin_business, content_admin_headers):
        response = client.put(
            f"/api/v1/businesses/{content_admin_business.id}",
            headers=content_admin_headers,
            json={"description": "New menu."}
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["requires_approval"] is True
        assert data["business"]["pending_changes"] == {"description": "New menu."}
        assert data["business"]["description"] == "Coffee with a river view."

    def test_update_forbidden(self, client, test_business, content_admin_headers):
        response = client.put(
            f"/api/v1/businesses/{test_business.id}",
            headers=content_admin_headers,
            json={"description": "Hijacked"}
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_requires_auth(self, client, test_business):
        response = client.put(f"/api/v1/businesses/{test_business.id}", json={"description": "x"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_update_not_found(self, client, owner_headers):
        response = client.put("/api/v1/businesses/999", headers=owner_headers, json={"description": "x"})
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.unit
class TestBusinessListing:

    def test_directory_lists_approved_only(self, client, test_business, content_admin_business):
        response = client.get("/api/v1/businesses")
        assert [item["id"] for item in response.json()] == [content_admin_business.id]

    def test_my_businesses(self, client, test_business, owner_headers):
        response = client.get("/api/v1/businesses/my-businesses", headers=owner_headers)
        assert [item["slug"] for item in response.json()] == ["abshop"]

    def test_public_stats(self, client, test_business, content_admin_business):
        response = client.get("/api/v1/businesses/stats")
        assert response.json() == {
            "total_businesses": 2,
            "approved_businesses": 1,
            "total_users": 2,
            "trust_percentage": 50,
        }

    def test_public_stats_without_businesses(self, client):
        assert client.get("/api/v1/businesses/stats").json()["trust_percentage"] == 98

    def test_categories_and_themes(self, client):
        assert "Food & Beverage" in client.get("/api/v1/businesses/categories").json()
        themes = client.get("/api/v1/businesses/themes").json()
        assert [theme["key"] for theme in themes] == ["modern", "classic", "minimal"]

    def test_get_business_as_owner(self, client, test_business, owner_headers, content_admin_headers):
        assert client.get(f"/api/v1/businesses/{test_business.id}", headers=owner_headers).status_code == 200
        assert client.get(
            f"/api/v1/businesses/{test_business.id}", headers=content_admin_headers
        ).status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.unit
class TestAdminActions:
    """Tests for main admin endpoints"""

    def test_approve(self, client, test_business, admin_headers):
        response = client.post(f"/api/v1/admin/businesses/{test_business.id}/approve", headers=admin_headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "approved"

    def test_approve_twice_conflicts(self, client, approved_business, admin_headers):
        response = client.post(f"/api/v1/admin/businesses/{approved_business.id}/approve", headers=admin_headers)
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_requires_main_admin(self, client, test_business, content_admin_headers):
        response = client.post(
            f"/api/v1/admin/businesses/{test_business.id}/approve", headers=content_admin_headers
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "Main admin access required"

    def test_approve_edit(self, client, db, content_admin_business, content_admin_headers, admin_headers):
        client.put(
            f"/api/v1/businesses/{content_admin_business.id}",
            headers=content_admin_headers,
            json={"description": "New menu."}
        )
        response = client.post(
            f"/api/v1/admin/businesses/{content_admin_business.id}/approve-edit", headers=admin_headers
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["description"] == "New menu."
        assert response.json()["edit_approval_status"] == "approved"

    def test_set_premium(self, client, test_business, admin_headers):
        response = client.put(
            f"/api/v1/admin/businesses/{test_business.id}/premium",
            headers=admin_headers,
            json={"is_premium": True}
        )
        assert response.json()["is_premium"] is True

    def test_missing_business(self, client, admin_headers):
        response = client.post("/api/v1/admin/businesses/999/reject", headers=admin_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Business not found"


@pytest.mark.unit
class TestAnalyticsEndpoints:

    def test_track_accepts_both_spellings(self, client, test_business, owner_headers):
        assert client.post(
            "/api/v1/analytics/track", json={"businessId": test_business.id, "eventType": "visitor"}
        ).json() == {"success": True}
        client.post("/api/v1/analytics/track", json={"business_id": str(test_business.id), "event_type": "map_click"})

        response = client.get(f"/api/v1/analytics/business/{test_business.id}", headers=owner_headers)
        totals = response.json()["totals"]
        assert totals["visitor_count"] == 1
        assert totals["map_clicks"] == 1

    def test_track_never_fails(self, client):
        for body in ({}, {"businessId": 999, "eventType": "visitor"}, {"businessId": "abc", "eventType": "x"}):
            response = client.post("/api/v1/analytics/track", json=body)
            assert response.status_code == status.HTTP_200_OK
            assert response.json() == {"success": True}

    def test_track_tolerates_wrong_types(self, client, db, test_business):
        bodies = (
            {"businessId": test_business.id, "eventType": 5},
            {"businessId": True, "eventType": "visitor"},
            {"businessId": [1], "eventType": {"a": 1}},
        )
        for body in bodies:
            response = client.post("/api/v1/analytics/track", json=body)
            assert response.status_code == status.HTTP_200_OK
            assert response.json() == {"success": True}
        assert db.query(AnalyticsEvent).count() == 0

    @pytest.mark.parametrize("content, content_type", [
        ("visitor", "text/plain"),
        ("{not json", "application/json"),
        ("[1, 2]", "application/json"),
        ("", "application/json"),
    ])
    def test_track_tolerates_malformed_body(self, client, content, content_type):
        response = client.post(
            "/api/v1/analytics/track", content=content, headers={"Content-Type": content_type}
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}

    def test_my_businesses_analytics(self, client, test_business, owner_headers):
        client.post("/api/v1/analytics/track", json={"businessId": test_business.id, "eventType": "call_click"})
        data = client.get("/api/v1/analytics/my-businesses", headers=owner_headers).json()
        assert data[0]["slug"] == "abshop"
        assert data[0]["stats"]["call_clicks"] == 1
        assert data[0]["stats"]["total_events"] == 1


@pytest.mark.unit
class TestPublicPages:
    """Tests for published business pages"""

    def test_pending_page_hidden(self, client, test_business):
        response = client.get("/abshop")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"detail": "Business not found"}

    def test_approved_page_served(self, client, approved_business):
        response = client.get("/abshop")
        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/html")
        assert "A &amp; B Shop" in response.text

    def test_subdomain_page(self, client, approved_business):
        response = client.get("/", headers={"host": "abshop.varanasihub.com"})
        assert response.status_code == status.HTTP_200_OK
        assert "A &amp; B Shop" in response.text

    def test_root_without_subdomain(self, client):
        response = client.get("/")
        assert response.status_code == status.HTTP_200_OK
        assert "message" in response.json()

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_approval_flow_end_to_end(self, client, db, business_data, admin_headers):
        created = client.post("/api/v1/businesses", json=business_data).json()
        assert client.get(f"/{created['slug']}").status_code == status.HTTP_404_NOT_FOUND

        client.post(f"/api/v1/admin/businesses/{created['id']}/approve", headers=admin_headers)
        assert client.get(f"/{created['slug']}").status_code == status.HTTP_200_OK
        assert db.query(Business).filter(Business.slug == "abshop").one().status == "approved"
