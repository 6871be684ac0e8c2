import json

from tests.conftest import UPLOAD_DIR

NBSP = "\u00a0"
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok", "service": "tourdesk"}


class TestAuth:
    def test_login_wrong_password(self, client):
        resp = client.post("/api/auth/login", json={"email": "admin@tourdesk.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid email or password"}

    def test_login_returns_user(self, client):
        resp = client.post("/api/auth/login", json={"email": "admin@tourdesk.com", "password": "admin-pass"})
        assert resp.status_code == 200
        assert resp.json()["user"]["role"] == "admin"

    def test_mutations_require_token(self, client):
        for method, url in [("post", "/api/tours"), ("put", "/api/tours/1"), ("delete", "/api/tours/1")]:
            resp = client.request(method.upper(), url, data={"title": "x"} if method != "delete" else None)
            assert resp.status_code == 401
            assert resp.json() == {"message": "Not authenticated"}

    def test_invalid_token(self, client):
        resp = client.delete("/api/tours/1", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401
        assert "message" in resp.json()


class TestCrud:
    def test_list_empty(self, client):
        assert client.get("/api/tours").json() == []

    def test_create_and_get(self, client, make_tour):
        tour_id = make_tour(
            short_description="Snow",
            location="Switzerland",
            date_start="2025-05-01",
            date_end="2025-05-10",
            duration="10",
            max_participants="12",
        )
        resp = client.get(f"/api/tours/{tour_id}")
        assert resp.status_code == 200
        body = resp.json()
        assert body["title"] == "Alps"
        assert body["price"] == 1250.0
        assert body["status"] == "active"
        assert body["date_start"] == "2025-05-01"
        assert body["duration"] == 10
        assert body["programs"] == []
        assert body["image_url"] is None

    def test_create_response_shape(self, client, auth_headers):
        resp = client.post("/api/tours", data={"title": "Alps", "price": "10", "status": "active"}, headers=auth_headers)
        assert resp.status_code == 201
        assert set(resp.json()) == {"id", "message"}

    def test_create_requires_title_price_status(self, client, auth_headers):
        resp = client.post("/api/tours", data={"description": "only"}, headers=auth_headers)
        assert resp.status_code == 400
        body = resp.json()
        assert body["message"] == "Validation error"
        assert {e["field"] for e in body["errors"]} == {"title", "price", "status"}

    def test_create_rejects_bad_values(self, client, auth_headers):
        data = {"title": "Alps", "price": "-1", "status": "archived", "date_start": "2025-05-10", "date_end": "2025-05-01"}
        resp = client.post("/api/tours", data=data, headers=auth_headers)
        assert resp.status_code == 400
        assert {e["field"] for e in resp.json()["errors"]} == {"price", "status", "date_end"}

    def test_create_rejects_unparsable_fields(self, client, auth_headers):
        resp = client.post("/api/tours", data={"title": "Alps", "price": "cheap", "status": "active"}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Validation error"

    def test_programs(self, client, auth_headers, make_tour):
        programs = [{"day": 1, "title": "Arrival"}, {"day": 2, "title": "Hike", "description": "Glacier"}]
        tour_id = make_tour(programs=json.dumps(programs))
        body = client.get(f"/api/tours/{tour_id}").json()
        assert [p["title"] for p in body["programs"]] == ["Arrival", "Hike"]

        resp = client.post(
            "/api/tours",
            data={"title": "x", "price": "1", "status": "active", "programs": "{not json"},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "programs"

        resp = client.post(
            "/api/tours",
            data={"title": "x", "price": "1", "status": "active", "programs": '{"day": 1}'},
            headers=auth_headers,
        )
        assert resp.status_code == 400

    def test_get_missing(self, client):
        resp = client.get("/api/tours/999")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Tour not found"}

    def test_partial_update(self, client, auth_headers, make_tour):
        tour_id = make_tour()
        resp = client.put(f"/api/tours/{tour_id}", data={"price": "990"}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Tour updated"}

        body = client.get(f"/api/tours/{tour_id}").json()
        assert body["price"] == 990.0
        assert body["title"] == "Alps"

    def test_update_checks_dates_against_stored_values(self, client, auth_headers, make_tour):
        tour_id = make_tour(date_start="2025-05-10")
        resp = client.put(f"/api/tours/{tour_id}", data={"date_end": "2025-05-01"}, headers=auth_headers)
        assert resp.status_code == 400

    def test_update_missing(self, client, auth_headers):
        resp = client.put("/api/tours/999", data={"price": "1"}, headers=auth_headers)
        assert resp.status_code == 404

    def test_delete(self, client, auth_headers, make_tour):
        tour_id = make_tour()
        resp = client.delete(f"/api/tours/{tour_id}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Tour deleted"}
        assert client.get(f"/api/tours/{tour_id}").status_code == 404
        assert client.delete(f"/api/tours/{tour_id}", headers=auth_headers).status_code == 404


class TestImages:
    def test_upload_replace_and_delete(self, client, auth_headers):
        resp = client.post(
            "/api/tours",
            data={"title": "Alps", "price": "1250", "status": "active"},
            files={"image": ("cover.png", PNG, "image/png")},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        tour_id = resp.json()["id"]

        first = client.get(f"/api/tours/{tour_id}").json()["image_url"]
        assert first.startswith("uploads/tours/") and first.endswith(".png")
        assert (UPLOAD_DIR / "tours" / first.rsplit("/", 1)[1]).exists()
        assert client.get(f"/{first}").content == PNG

        resp = client.put(
            f"/api/tours/{tour_id}",
            files={"image": ("new.jpg", b"jpeg", "image/jpeg")},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        second = client.get(f"/api/tours/{tour_id}").json()["image_url"]
        assert second != first
        assert not (UPLOAD_DIR / "tours" / first.rsplit("/", 1)[1]).exists()

        client.delete(f"/api/tours/{tour_id}", headers=auth_headers)
        assert not (UPLOAD_DIR / "tours" / second.rsplit("/", 1)[1]).exists()

    def test_non_image_rejected(self, client, auth_headers):
        resp = client.post(
            "/api/tours",
            data={"title": "Alps", "price": "1250", "status": "active"},
            files={"image": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["errors"] == [{"field": "image", "message": "File must be an image"}]
        assert client.get("/api/tours").json() == []


class TestFilters:
    def test_filters(self, client, make_tour):
        make_tour(title="Alps Hike", price="1250", location="Switzerland")
        make_tour(title="Yerevan Weekend", price="640", location="Armenia", short_description="Garni temple")
        make_tour(title="Old Tbilisi", price="900", location="Georgia", status="cancelled")

        def titles(**params):
            resp = client.get("/api/tours", params=params)
            assert resp.status_code == 200
            return sorted(t["title"] for t in resp.json())

        assert titles(status="cancelled") == ["Old Tbilisi"]
        assert titles(search="ALPS") == ["Alps Hike"]
        assert titles(search="garni") == ["Yerevan Weekend"]
        assert titles(location="armen") == ["Yerevan Weekend"]
        assert titles(minPrice="700") == ["Alps Hike", "Old Tbilisi"]
        assert titles(maxPrice="900") == ["Old Tbilisi", "Yerevan Weekend"]
        assert titles(minPrice="640", maxPrice="640") == ["Yerevan Weekend"]

    def test_search_wildcards_are_literal(self, client, make_tour):
        make_tour(title="Alps Hike", location="Switzerland")
        make_tour(title="Lake_Side", location="Italy")

        for needle in ("%", "_"):
            titles = [t["title"] for t in client.get("/api/tours", params={"search": needle}).json()]
            assert titles == ([] if needle == "%" else ["Lake_Side"])
        assert client.get("/api/tours", params={"location": "%"}).json() == []

    def test_invalid_filter(self, client):
        resp = client.get("/api/tours", params={"minPrice": "abc"})
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "minPrice"


class TestCards:
    def test_cards_html(self, client, make_tour):
        later = make_tour(title="Later", date_start="2025-06-13", date_end="2025-06-15", price="640")
        earlier = make_tour(title="Earlier", date_start="2025-05-01", image_url="ignored")

        resp = client.get("/api/tours/cards")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")

        html = resp.text
        assert html.index(f'data-tour-url="/tour/{earlier}"') < html.index(f'data-tour-url="/tour/{later}"')
        assert "13 июня 2025 г. - 15 июня 2025 г." in html
        assert f"от 1{NBSP}250€" in html
        assert '<span class="tour-card-separator"> • </span>' in html
        assert 'data-bg="/assets/images/hero_background-min.jpg"' in html
        assert 'data-tilda-ignore="true"' in html

    def test_cards_respect_filters(self, client, make_tour):
        make_tour(title="Alps", status="inactive")
        assert client.get("/api/tours/cards", params={"status": "active"}).text == ""
