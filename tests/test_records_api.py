"""
HTTP tests for /api/records

Requests run through the real FastAPI app against the in-memory database;
authentication is replaced by a fixed guide principal except where the
test is about authentication itself.
"""

import io
from datetime import datetime

import pytest
from openpyxl import load_workbook

from conftest import booking_row, workbook_bytes
from tickmypax.models.passenger_record import PassengerRecord, ArchivePassengerRecord

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def upload(client, content, filename="bookings.xlsx"):
    return client.post(
        "/api/records/import-excel",
        files={"file": (filename, content, XLSX)},
    )


class TestAuthRequired:

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/records"),
        ("get", "/api/records/stats"),
        ("get", "/api/records/download-today"),
        ("post", "/api/records/1/checkin"),
        ("post", "/api/records/1/remove-checkin"),
        ("get", "/api/tours/allTours"),
    ])
    def test_anonymous_requests_are_rejected(self, anonymous_client, method, path):
        response = getattr(anonymous_client, method)(path)
        assert response.status_code == 401


class TestImportEndpoint:

    def test_import_returns_summary(self, client, db):
        content = workbook_bytes([
            booking_row(tour_type="Dublin", pax=4),
            booking_row(tour_date=None, tour_type="Dublin"),
        ])

        response = upload(client, content)

        assert response.status_code == 200
        data = response.json()
        assert data["totalRowsProcessed"] == 2
        assert data["rowsImported"] == 1
        assert data["errors"] == []
        assert data["message"]
        assert db.query(PassengerRecord).count() == 1

    def test_missing_file_is_400(self, client):
        response = client.post("/api/records/import-excel")

        assert response.status_code == 400
        assert response.json()["detail"] == "No file provided."

    def test_unreadable_file_is_400(self, client, add_record, db):
        add_record()

        response = upload(client, b"garbage")

        assert response.status_code == 400
        db.expire_all()
        assert db.query(PassengerRecord).count() == 0
        assert db.query(ArchivePassengerRecord).count() == 1


class TestListing:

    def test_records_ordered_by_date_with_camel_case(self, client, add_record):
        add_record(tour_type="Cliffs", tour_date=datetime(2025, 4, 16), unique_reference="B")
        add_record(tour_type="Dublin", tour_date=datetime(2025, 4, 15), unique_reference="A")

        response = client.get("/api/records")

        assert response.status_code == 200
        data = response.json()
        assert [r["uniqueReference"] for r in data] == ["A", "B"]
        assert data[0]["tourDate"].startswith("2025-04-15T00:00:00")
        assert data[0]["tourDate"].endswith("Z")
        assert data[0]["checkedIn"] is False
        assert data[0]["checkedInBy"] is None
        assert "originalPax" in data[0]

    def test_tour_type_substring_filter(self, client, add_record):
        add_record(tour_type="Cliffs of Moher")
        add_record(tour_type="Dublin")
        add_record(tour_type=None)

        response = client.get("/api/records", params={"tourType": "Cliffs"})

        assert [r["tourType"] for r in response.json()] == ["Cliffs of Moher"]

    def test_filter_wildcards_are_literal(self, client, add_record):
        add_record(tour_type="Cliffs")
        add_record(tour_type="Day_Trip")
        add_record(tour_type="100% Dublin")

        underscore = client.get("/api/records", params={"tourType": "_"}).json()
        percent = client.get("/api/records", params={"tourType": "%"}).json()

        assert [r["tourType"] for r in underscore] == ["Day_Trip"]
        assert [r["tourType"] for r in percent] == ["100% Dublin"]

    def test_get_single_record(self, client, add_record):
        record = add_record(surname="Kelly")

        response = client.get(f"/api/records/{record.id}")

        assert response.status_code == 200
        assert response.json()["surname"] == "Kelly"

    def test_get_unknown_record_is_404(self, client):
        assert client.get("/api/records/9999").status_code == 404

    def test_archive_listing(self, client, add_record):
        add_record(tour_type="Cliffs")
        upload(client, workbook_bytes([booking_row(tour_type="Dublin")]))

        response = client.get("/api/records/archive")

        assert response.status_code == 200
        data = response.json()
        assert [r["tourType"] for r in data] == ["Cliffs"]
        assert data[0]["archivedAt"].endswith("Z")


class TestCheckInEndpoints:

    def test_check_in_attributes_to_caller(self, client, add_record, db):
        record = add_record()

        response = client.post(f"/api/records/{record.id}/checkin")

        assert response.status_code == 200
        assert response.text == "Checked in"
        db.expire_all()
        stored = db.get(PassengerRecord, record.id)
        assert stored.checked_in is True
        assert stored.checked_in_by == "Anna"

    def test_remove_check_in(self, client, add_record, db):
        record = add_record(checked_in=True, checked_in_by="Anna")

        response = client.post(f"/api/records/{record.id}/remove-checkin")

        assert response.status_code == 200
        assert response.text == "Check-in removed"
        db.expire_all()
        stored = db.get(PassengerRecord, record.id)
        assert stored.checked_in is False
        assert stored.checked_in_by is None

    def test_check_in_unknown_record_is_404(self, client):
        response = client.post("/api/records/9999/checkin")

        assert response.status_code == 404
        assert "detail" in response.json()

    def test_unique_ref_check_in(self, client, add_record):
        add_record(unique_reference="BK-1", tour_type="Cliffs")

        response = client.post(
            "/api/records/checkin-unique",
            json={"uniqueRef": "BK-1", "tourType": "Cliffs"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["passenger"]["checkedIn"] is True
        assert data["passenger"]["checkedInBy"] == "Anna"

    def test_unique_ref_wrong_tour_is_409(self, client, add_record, db):
        record = add_record(unique_reference="BK-1", tour_type="Cliffs")

        response = client.post(
            "/api/records/checkin-unique",
            json={"uniqueRef": "BK-1", "tourType": "Dublin"},
        )

        assert response.status_code == 409
        assert "Cliffs" in response.json()["detail"]
        assert response.json()["actualTourType"] == "Cliffs"
        db.expire_all()
        assert db.get(PassengerRecord, record.id).checked_in is False

    def test_unique_ref_not_found_is_404(self, client):
        response = client.post("/api/records/checkin-unique", json={"uniqueRef": "NOPE"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Passenger not found."

    def test_unique_ref_missing_is_400(self, client):
        response = client.post("/api/records/checkin-unique", json={"tourType": "Cliffs"})

        assert response.status_code == 400


class TestPaxAndManualLifecycle:

    def test_update_pax(self, client, add_record):
        record = add_record(pax=4)

        response = client.put(f"/api/records/{record.id}/pax", json={"pax": 6})

        assert response.status_code == 200
        data = response.json()
        assert data["pax"] == 6
        assert data["originalPax"] == 4

    def test_negative_pax_is_rejected(self, client, add_record):
        record = add_record(pax=4)

        response = client.put(f"/api/records/{record.id}/pax", json={"pax": -1})

        assert response.status_code == 422

    def test_create_and_remove(self, client, db):
        response = client.post("/api/records/create", json={
            "tourDate": "2025-04-15T09:30:00Z",
            "tourType": "Cliffs",
            "surname": "Walsh",
            "pax": 2,
            "uniqueReference": "MAN-1",
        })

        assert response.status_code == 201
        created = response.json()
        assert created["originalPax"] == 2
        assert created["checkedIn"] is False

        response = client.post("/api/records/remove", json={"id": created["id"]})

        assert response.status_code == 200
        db.expire_all()
        assert db.query(PassengerRecord).count() == 0
        assert db.query(ArchivePassengerRecord).count() == 0

    def test_remove_unknown_is_404(self, client):
        assert client.post("/api/records/remove", json={"id": 1234}).status_code == 404

    def test_create_rejects_text_longer_than_column(self, client):
        response = client.post("/api/records/create", json={
            "tourDate": "2025-04-15T09:30:00Z",
            "surname": "S" * 300,
        })

        assert response.status_code == 422


class TestStatsAndReport:

    def test_stats_payload_shape(self, client, add_record):
        add_record(tour_type="Cliffs", pax=3, checked_in=True, checked_in_by="Anna")
        add_record(tour_type="Cliffs", pax=5)

        response = client.get("/api/records/stats")

        assert response.status_code == 200
        (cliffs,) = response.json()
        assert cliffs["tourType"] == "Cliffs"
        assert cliffs["totalClients"] == 8
        assert cliffs["checkedInCount"] == 1
        assert cliffs["notArrivedCount"] == 7
        assert {g["guideName"] for g in cliffs["guides"]} == {"Anna", "None"}
        anna = next(g for g in cliffs["guides"] if g["guideName"] == "Anna")
        assert anna == {"guideName": "Anna", "clients": 3, "checkedInCount": 1, "notArrivedCount": 2}

    def test_download_today(self, client, add_record):
        add_record(tour_type="Cliffs", pax=3)

        response = client.get("/api/records/download-today")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(XLSX)
        assert "TodayReport_" in response.headers["content-disposition"]
        ws = load_workbook(io.BytesIO(response.content)).active
        assert ws["A1"].value == "Cliffs - Total pax: 3"

    def test_download_today_without_records_is_404(self, client):
        response = client.get("/api/records/download-today")

        assert response.status_code == 404
        assert response.json()["detail"] == "No records found."


class TestLongCellValues:
    """Whatever the import stored must be readable and checkable afterwards"""

    def test_overlong_tour_type_is_reported_not_stored(self, client, db):
        content = workbook_bytes([booking_row(tour_type="T" * 300, unique_ref="R1")])

        response = upload(client, content)

        assert response.status_code == 200
        data = response.json()
        assert data["rowsImported"] == 0
        assert data["errors"] == ["Row 2: Tour Type is longer than 256 characters."]
        assert client.get("/api/records").status_code == 200

    def test_long_notes_import_then_list_and_check_in(self, client, db):
        content = workbook_bytes([booking_row(unique_ref="R1", notes="n" * 5000)])
        upload(client, content)

        listing = client.get("/api/records")
        check_in = client.post("/api/records/checkin-unique", json={"uniqueRef": "R1"})

        assert listing.status_code == 200
        assert len(listing.json()[0]["notes"]) == 5000
        assert check_in.status_code == 200
        assert check_in.json()["passenger"]["checkedIn"] is True

    def test_stored_value_longer_than_create_limit_is_served(self, client, add_record):
        add_record(tour_type="T" * 300, unique_reference="R1")

        listing = client.get("/api/records")
        check_in = client.post("/api/records/checkin-unique", json={"uniqueRef": "R1"})

        assert listing.status_code == 200
        assert check_in.status_code == 200
        assert check_in.json()["passenger"]["tourType"] == "T" * 300
