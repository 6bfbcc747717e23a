"""
Tests for structured data endpoints.
"""


class TestModelYearStructuredData:

    def test_breadcrumbs(self, client, catalog):
        response = client.get(
            f"/seo/model-years/{catalog.camry_2024.id}/breadcrumbs"
        )
        assert response.status_code == 200
        data = response.json()
        assert data["@type"] == "BreadcrumbList"
        assert [item["name"] for item in data["itemListElement"]] == [
            "Home", "New Cars", "Toyota",
        ]

    def test_schema_type_from_query(self, client, catalog):
        response = client.get(
            f"/seo/model-years/{catalog.camry_2024.id}/breadcrumbs",
            params={"type": "ItemList"},
        )
        assert response.json()["@type"] == "ItemList"

    def test_product(self, client, catalog):
        response = client.get(f"/seo/model-years/{catalog.camry_2024.id}/product")
        assert response.status_code == 200
        data = response.json()

        assert data["@type"] == "Product"
        assert data["name"] == "2024 Toyota Camry"
        assert data["offers"]["lowPrice"] == 26420
        assert data["offers"]["highPrice"] == 31121
        assert data["offers"]["offerCount"] == 2
        assert data["aggregateRating"] == {
            "@type": "AggregateRating",
            "ratingValue": 4.5,
            "reviewCount": 2,
        }
        assert [review["author"]["name"] for review in data["review"]] == [
            "Sam", "Alex",
        ]
        assert len(data["image"]) == 4

    def test_product_lists_similar_cars(self, client, catalog):
        data = client.get(
            f"/seo/model-years/{catalog.camry_2024.id}/product"
        ).json()

        (similar,) = data["isSimilarTo"]
        assert similar["name"] == "2024 Toyota RAV4"
        assert "aggregateRating" not in similar

    def test_similar_car_carries_its_rating(self, client, catalog):
        data = client.get(
            f"/seo/model-years/{catalog.rav4_2024.id}/product"
        ).json()

        (similar,) = data["isSimilarTo"]
        assert similar["name"] == "2024 Toyota Camry"
        assert similar["aggregateRating"]["ratingValue"] == 4.5
        assert "review" not in data

    def test_missing_model_year_returns_404(self, client):
        assert client.get("/seo/model-years/999/product").status_code == 404
        assert client.get("/seo/model-years/999/breadcrumbs").status_code == 404


class TestVehicleStructuredData:

    def test_breadcrumbs(self, client, catalog):
        data = client.get(
            f"/seo/vehicles/{catalog.camry_le.id}/breadcrumbs"
        ).json()

        assert len(data["itemListElement"]) == 4
        assert data["itemListElement"][3]["item"]["@id"].endswith(
            "/toyota/2024/camry/camry-2-5-le"
        )

    def test_product(self, client, catalog):
        data = client.get(f"/seo/vehicles/{catalog.camry_le.id}/product").json()

        assert data["name"] == "2024 Toyota Camry 2.5 LE"
        assert data["offers"]["price"] == 26420
        (similar,) = data["isSimilarTo"]
        assert similar["name"] == "2024 Toyota Camry 2.5 Hybrid SE"

    def test_missing_vehicle_returns_404(self, client):
        assert client.get("/seo/vehicles/999/product").status_code == 404
