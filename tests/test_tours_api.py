"""
HTTP tests for /api/tours
"""

from tickmypax.models.tour import Tour, Passenger


class TestGuideAssignment:

    def test_put_guide_creates_tour(self, client, db):
        response = client.put("/api/tours/guide", params={"tourType": "Cliffs"}, json={"guideName": "Anna"})

        assert response.status_code == 200
        data = response.json()
        assert data["tourType"] == "Cliffs"
        assert data["tourName"] == "Cliffs"
        assert data["guideName"] == "Anna"
        assert data["tourDate"].endswith("Z")
        assert db.query(Tour).count() == 1

    def test_put_guide_updates_existing(self, client, db):
        first = client.put("/api/tours/guide", params={"tourType": "Cliffs"}, json={"guideName": "Anna"}).json()

        second = client.put("/api/tours/guide", params={"tourType": "cliffs"}, json={"guideName": "Liam"}).json()

        assert second["id"] == first["id"]
        assert second["guideName"] == "Liam"
        db.expire_all()
        assert db.query(Tour).count() == 1

    def test_missing_tour_type_is_400(self, client):
        response = client.put("/api/tours/guide", json={"guideName": "Anna"})

        assert response.status_code == 400
        assert response.json()["detail"] == "tourType is required."


class TestTourListings:

    def test_all_tours_sums_pax(self, client, add_record):
        add_record(tour_type="Cliffs", pax=3)
        add_record(tour_type="Cliffs", pax=5)
        add_record(tour_type="Dublin", pax=2)
        client.put("/api/tours/guide", params={"tourType": "Dublin"}, json={"guideName": "Liam"})

        response = client.get("/api/tours/allTours")

        assert response.status_code == 200
        assert response.json() == [
            {"tourType": "Cliffs", "totalPax": 8, "guideName": None},
            {"tourType": "Dublin", "totalPax": 2, "guideName": "Liam"},
        ]

    def test_tour_with_passengers(self, client, db):
        tour = Tour(tour_type="Cliffs", tour_name="Cliffs", guide_name="Anna")
        tour.passengers.append(Passenger(surname="Murphy", first_name="Sean", pax=2))
        db.add(tour)
        db.commit()

        response = client.get(f"/api/tours/{tour.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["guideName"] == "Anna"
        assert len(data["passengers"]) == 1
        assert data["passengers"][0]["surname"] == "Murphy"
        assert data["passengers"][0]["passengerGuid"]

    def test_today_lists_tours(self, client, db):
        db.add_all([Tour(tour_type="Cliffs"), Tour(tour_type="Dublin")])
        db.commit()

        response = client.get("/api/tours/today")

        assert response.status_code == 200
        assert {t["tourType"] for t in response.json()} == {"Cliffs", "Dublin"}

    def test_unknown_tour_is_404(self, client):
        assert client.get("/api/tours/555").status_code == 404
