"""
Tests for the REST API.

Tests:
- Storefront reads (hidden items, inactive banners, default settings)
- Admin authentication
- Category / banner ordering: create, delete, reorder
- Menu item toggles and settings upsert
"""
import pytest


def create_categories(client, *names):
    return [client.post("/api/admin/categories", json={"name": name}).json() for name in names]


def create_item(client, category_id, name, price=500, **extra):
    body = {"categoryId": category_id, "name": name, "description": f"{name}!", "price": price}
    body.update(extra)
    response = client.post("/api/admin/menu-items", json=body)
    assert response.status_code == 200, response.text
    return response.json()


# ============= Health & Auth =============


class TestHealthAndAuth:
    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "operational"
        assert data["database"] == "healthy"

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/admin/categories"),
        ("post", "/api/admin/categories/reorder"),
        ("post", "/api/admin/banners/reorder"),
        ("get", "/api/admin/menu-items"),
        ("put", "/api/admin/settings"),
    ])
    def test_admin_routes_require_login(self, client, method, path):
        response = client.request(method.upper(), path, json={})
        assert response.status_code == 401

    def test_login_me_logout(self, client):
        assert client.get("/api/auth/me").status_code == 401

        response = client.post("/api/auth/login", json={"username": "admin", "password": "test-password"})
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "admin"
        assert "password" not in response.json()["user"]

        assert client.get("/api/auth/me").status_code == 200

        client.post("/api/auth/logout")
        assert client.get("/api/auth/me").status_code == 401

    def test_wrong_password(self, client):
        response = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
        assert response.status_code == 401


# ============= Storefront reads =============


class TestStorefront:
    def test_default_settings_when_none_saved(self, client):
        data = client.get("/api/settings").json()
        assert data == {"whatsappNumber": "", "restaurantName": "Mini's & Twennies", "currency": "$"}

    def test_hidden_items_are_filtered(self, admin_client):
        (burgers,) = create_categories(admin_client, "Burgers")
        create_item(admin_client, burgers["id"], "Classic")
        create_item(admin_client, burgers["id"], "Secret", isHidden=True)
        create_item(admin_client, burgers["id"], "Sold Out", isAvailable=False)

        public = [item["name"] for item in admin_client.get("/api/menu-items").json()]
        by_category = [
            item["name"]
            for item in admin_client.get(f"/api/menu-items/category/{burgers['id']}").json()
        ]
        admin = [item["name"] for item in admin_client.get("/api/admin/menu-items").json()]

        assert sorted(public) == ["Classic", "Sold Out"]
        assert sorted(by_category) == ["Classic", "Sold Out"]
        assert sorted(admin) == ["Classic", "Secret", "Sold Out"]

    def test_only_active_banners_are_public(self, admin_client):
        admin_client.post("/api/admin/banners", json={"imageUrl": "/b/1.jpg"})
        admin_client.post("/api/admin/banners", json={"imageUrl": "/b/2.jpg", "isActive": False})

        public = admin_client.get("/api/banners").json()
        assert [b["imageUrl"] for b in public] == ["/b/1.jpg"]
        assert len(admin_client.get("/api/admin/banners").json()) == 2


# ============= Ordering =============


class TestOrdering:
    def test_create_appends_contiguously(self, admin_client):
        rows = create_categories(admin_client, "A", "B", "C")
        assert [row["order"] for row in rows] == [0, 1, 2]

    def test_create_at_position_shifts_others(self, admin_client):
        create_categories(admin_client, "A", "B")
        admin_client.post("/api/admin/categories", json={"name": "First", "order": 0})

        listed = admin_client.get("/api/categories").json()
        assert [(c["name"], c["order"]) for c in listed] == [("First", 0), ("A", 1), ("B", 2)]

    def test_reorder_assigns_positions(self, admin_client):
        a, b, c = create_categories(admin_client, "A", "B", "C")

        response = admin_client.post(
            "/api/admin/categories/reorder",
            json={"categoryIds": [c["id"], a["id"], b["id"]]},
        )
        assert response.status_code == 200
        assert response.json() == {"success": True}

        listed = admin_client.get("/api/categories").json()
        assert [(x["name"], x["order"]) for x in listed] == [("C", 0), ("A", 1), ("B", 2)]

    def test_reorder_rejects_duplicates(self, admin_client):
        a, b = create_categories(admin_client, "A", "B")
        response = admin_client.post(
            "/api/admin/categories/reorder",
            json={"categoryIds": [a["id"], a["id"]]},
        )
        assert response.status_code == 422

    def test_reorder_rejects_partial_sequence(self, admin_client):
        a, b, c = create_categories(admin_client, "A", "B", "C")
        response = admin_client.post(
            "/api/admin/categories/reorder",
            json={"categoryIds": [b["id"], a["id"]]},
        )
        assert response.status_code == 400
        assert "Invalid reorder data" in response.json()["detail"]

        listed = admin_client.get("/api/categories").json()
        assert [x["name"] for x in listed] == ["A", "B", "C"]

    def test_reorder_rejects_unknown_ids(self, admin_client):
        (a,) = create_categories(admin_client, "A")
        response = admin_client.post(
            "/api/admin/categories/reorder",
            json={"categoryIds": [a["id"], "ghost"]},
        )
        assert response.status_code == 400

    def test_reorder_rejects_empty_list(self, admin_client):
        response = admin_client.post("/api/admin/banners/reorder", json={"bannerIds": []})
        assert response.status_code == 422

    def test_delete_closes_gap(self, admin_client):
        a, b, c = create_categories(admin_client, "A", "B", "C")
        assert admin_client.delete(f"/api/admin/categories/{b['id']}").status_code == 200

        listed = admin_client.get("/api/categories").json()
        assert [(x["name"], x["order"]) for x in listed] == [("A", 0), ("C", 1)]

    def test_delete_category_keeps_its_items(self, admin_client):
        (burgers,) = create_categories(admin_client, "Burgers")
        create_item(admin_client, burgers["id"], "Classic")

        admin_client.delete(f"/api/admin/categories/{burgers['id']}")

        items = admin_client.get("/api/admin/menu-items").json()
        assert [item["categoryId"] for item in items] == [burgers["id"]]

    def test_banner_reorder(self, admin_client):
        first = admin_client.post("/api/admin/banners", json={"imageUrl": "/b/1.jpg"}).json()
        second = admin_client.post("/api/admin/banners", json={"imageUrl": "/b/2.jpg"}).json()

        response = admin_client.post(
            "/api/admin/banners/reorder",
            json={"bannerIds": [second["id"], first["id"]]},
        )
        assert response.status_code == 200
        assert [b["id"] for b in admin_client.get("/api/banners").json()] == [second["id"], first["id"]]

    def test_missing_rows_404(self, admin_client):
        assert admin_client.delete("/api/admin/categories/ghost").status_code == 404
        assert admin_client.put("/api/admin/banners/ghost", json={"isActive": False}).status_code == 404


# ============= Menu items & settings =============


class TestMenuItemsAndSettings:
    def test_toggles(self, admin_client):
        (burgers,) = create_categories(admin_client, "Burgers")
        item = create_item(admin_client, burgers["id"], "Classic")

        toggled = admin_client.post(f"/api/admin/menu-items/{item['id']}/toggle-availability").json()
        assert toggled["isAvailable"] is False

        hidden = admin_client.post(f"/api/admin/menu-items/{item['id']}/toggle-visibility").json()
        assert hidden["isHidden"] is True
        assert admin_client.get("/api/menu-items").json() == []

    def test_update_menu_item(self, admin_client):
        (burgers,) = create_categories(admin_client, "Burgers")
        item = create_item(admin_client, burgers["id"], "Classic", price=899)

        updated = admin_client.put(f"/api/admin/menu-items/{item['id']}", json={"price": 999}).json()
        assert updated["price"] == 999
        assert updated["name"] == "Classic"

    def test_negative_price_rejected(self, admin_client):
        (burgers,) = create_categories(admin_client, "Burgers")
        response = admin_client.post(
            "/api/admin/menu-items",
            json={"categoryId": burgers["id"], "name": "Bad", "description": "", "price": -1},
        )
        assert response.status_code == 422

    def test_settings_upsert(self, admin_client):
        response = admin_client.put("/api/admin/settings", json={"whatsappNumber": "+1 234 567 890"})
        assert response.status_code == 200
        created = response.json()
        assert created["restaurantName"] == "Mini's & Twennies"
        assert created["whatsappNumber"] == "+1 234 567 890"

        updated = admin_client.put("/api/admin/settings", json={"restaurantName": "Bistro"}).json()
        assert updated["id"] == created["id"]
        assert updated["whatsappNumber"] == "+1 234 567 890"

        public = admin_client.get("/api/settings").json()
        assert public["restaurantName"] == "Bistro"

    @pytest.mark.parametrize("path_kind,body", [
        ("categories", {"name": None}),
        ("menu-items", {"price": None}),
        ("menu-items", {"name": None, "description": "still fine"}),
        ("menu-items", {"isAvailable": None}),
        ("banners", {"imageUrl": None}),
    ])
    def test_explicit_null_on_required_field_rejected(self, admin_client, path_kind, body):
        (burgers,) = create_categories(admin_client, "Burgers")
        rows = {
            "categories": burgers,
            "menu-items": create_item(admin_client, burgers["id"], "Classic", price=899),
            "banners": admin_client.post("/api/admin/banners", json={"imageUrl": "/b/1.jpg"}).json(),
        }
        row = rows[path_kind]

        response = admin_client.put(f"/api/admin/{path_kind}/{row['id']}", json=body)
        assert response.status_code == 422

        listed = admin_client.get(f"/api/admin/{path_kind}").json()
        assert row in listed

    def test_nullable_field_can_be_cleared(self, admin_client):
        (burgers,) = create_categories(admin_client, "Burgers")
        item = create_item(admin_client, burgers["id"], "Classic", imageUrl="/img/classic.png")

        updated = admin_client.put(f"/api/admin/menu-items/{item['id']}", json={"imageUrl": None}).json()
        assert updated["imageUrl"] is None

    @pytest.mark.parametrize("body", [
        {"whatsappNumber": "123"},
        {"restaurantName": None},
        {"currency": None},
        {"logoUrl": "not a url"},
        {"contactEmail": "nobody"},
    ])
    def test_settings_validation(self, admin_client, body):
        assert admin_client.put("/api/admin/settings", json=body).status_code == 422
