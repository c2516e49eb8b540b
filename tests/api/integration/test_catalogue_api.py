"""Integration tests for product and rating endpoints via TestClient."""

from protean import current_domain

from storefront.catalogue.product import Product


class TestProductAPI:
    def test_admin_creates_product(self, client, auth, admin):
        response = client.post(
            "/products",
            json={"name": "Bread Knife", "price": 22.0, "stock": 4, "category": "Kitchen", "imageUrl": "https://x/y.jpg"},
            headers=auth(admin),
        )
        assert response.status_code == 201
        product = current_domain.repository_for(Product).get(response.json()["product_id"])
        assert product.image_url == "https://x/y.jpg"

    def test_customer_cannot_create_product(self, client, auth, customer):
        response = client.post("/products", json={"name": "X", "price": 1.0}, headers=auth(customer))
        assert response.status_code == 403

    def test_update_product(self, client, auth, admin, make_product):
        product = make_product(stock=0)
        response = client.put(f"/products/{product.id}", json={"stock": 9}, headers=auth(admin))
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert current_domain.repository_for(Product).get(product.id).stock == 9

    def test_admin_deletes_product(self, client, auth, admin, make_product):
        product = make_product()

        response = client.delete(f"/products/{product.id}", headers=auth(admin))

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert client.get(f"/products/{product.id}").status_code == 404

    def test_customer_cannot_delete_product(self, client, auth, customer, make_product):
        product = make_product()
        response = client.delete(f"/products/{product.id}", headers=auth(customer))
        assert response.status_code == 403
        assert client.get(f"/products/{product.id}").status_code == 200

    def test_delete_missing_product(self, client, auth, admin):
        assert client.delete("/products/missing", headers=auth(admin)).status_code == 404

    def test_browse_and_detail(self, client, make_product):
        product = make_product(name="Colander")
        assert [p["name"] for p in client.get("/products").json()] == ["Colander"]

        detail = client.get(f"/products/{product.id}").json()
        assert detail["name"] == "Colander"
        assert detail["average_rating"] == 0.0

    def test_missing_product(self, client):
        assert client.get("/products/missing").status_code == 404


class TestRatingAPI:
    def test_rate_after_delivery(self, client, auth, customer, make_product, place, advance):
        product = make_product()
        advance(place(customer, [(product, 1)]), "delivered")

        response = client.post(
            f"/products/{product.id}/rating", json={"stars": 5, "review": "Lovely"}, headers=auth(customer)
        )

        assert response.status_code == 200
        assert response.json() == {"average_rating": 5.0, "total_ratings": 1, "user_rating": 5}

        listing = client.get(f"/products/{product.id}/ratings").json()
        assert listing["total_ratings"] == 1
        assert listing["ratings"][0]["review"] == "Lovely"

    def test_not_eligible(self, client, auth, customer, make_product):
        product = make_product()
        response = client.post(f"/products/{product.id}/rating", json={"stars": 4}, headers=auth(customer))
        assert response.status_code == 403
        assert response.json()["code"] == "NotEligibleToRate"

    def test_already_rated(self, client, auth, customer, make_product, place, advance):
        product = make_product()
        advance(place(customer, [(product, 1)]), "delivered")
        client.post(f"/products/{product.id}/rating", json={"stars": 4}, headers=auth(customer))

        response = client.post(f"/products/{product.id}/rating", json={"stars": 2}, headers=auth(customer))
        assert response.status_code == 403
        assert response.json()["code"] == "AlreadyRated"

    def test_stars_out_of_range(self, client, auth, customer, make_product, place, advance):
        product = make_product()
        advance(place(customer, [(product, 1)]), "delivered")
        response = client.post(f"/products/{product.id}/rating", json={"stars": 9}, headers=auth(customer))
        assert response.status_code == 400

    def test_unknown_product(self, client, auth, customer):
        response = client.post("/products/missing/rating", json={"stars": 4}, headers=auth(customer))
        assert response.status_code == 404
