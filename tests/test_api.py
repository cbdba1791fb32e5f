"""Integration tests for the FastAPI endpoints."""

import pytest

from stalklog.models import StalkingRecord


def _create(client, **overrides):
    payload = {
        "date": "2023-04-08",
        "species": "Roe Deer",
        "sex": "Male",
        "maturity": "Adult",
        "weight": 14,
        "grid_ref": "so514398",
        "location": "FRITH WOODS",
        "shooter": "J. Smith",
        "time_of_day": "Morning",
    }
    payload.update(overrides)
    return client.post("/api/v1/records", json=payload)


class TestRootEndpoint:
    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert "message" in data
        assert data["docs"] == "/docs"

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["database"] == "ok"


class TestRecordsEndpoints:
    def test_list_empty(self, client):
        resp = client.get("/api/v1/records")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_create_canonicalises_grid_ref(self, client):
        resp = _create(client)
        assert resp.status_code == 201
        data = resp.json()
        assert data["grid_ref"] == "SO 514 398"
        assert 51.9 <= data["latitude"] <= 52.1
        assert -2.8 <= data["longitude"] <= -2.5
        assert data["date"] == "2023-04-08"

    def test_create_without_grid_ref(self, client):
        resp = _create(client, grid_ref="")
        assert resp.status_code == 201
        data = resp.json()
        assert data["grid_ref"] == ""
        assert data["latitude"] is None

    @pytest.mark.parametrize(
        ("grid_ref", "kind"),
        [
            ("SO123", "odd_digit_count"),
            ("ZZ123456", "unknown_grid_square"),
            ("12SO34", "malformed_reference"),
            ("SO1234567890123", "precision_overflow"),
        ],
    )
    def test_create_rejects_invalid_grid_ref(self, client, grid_ref, kind):
        resp = _create(client, grid_ref=grid_ref)
        assert resp.status_code == 422
        detail = resp.json()["detail"]
        assert detail["kind"] == kind
        assert grid_ref in detail["message"]
        assert client.get("/api/v1/records").json() == []

    def test_create_rejects_bad_enum(self, client):
        resp = _create(client, sex="Stag")
        assert resp.status_code == 422

    def test_get_not_found(self, client):
        resp = client.get("/api/v1/records/999")
        assert resp.status_code == 404

    def test_get_record(self, client):
        record_id = _create(client).json()["id"]
        resp = client.get(f"/api/v1/records/{record_id}")
        assert resp.status_code == 200
        assert resp.json()["species"] == "Roe Deer"

    def test_newest_first(self, client):
        _create(client, date="2023-01-01")
        _create(client, date="2023-06-01")
        _create(client, date="2023-03-01")
        dates = [r["date"] for r in client.get("/api/v1/records").json()]
        assert dates == ["2023-06-01", "2023-03-01", "2023-01-01"]

    def test_filters(self, client):
        _create(client, date="2023-01-01", species="Roe Deer", location="FRITH WOODS")
        _create(client, date="2023-06-01", species="Fallow Deer", location="HAUGH WOOD")
        _create(client, date="2023-09-01", species="Muntjac", remarks="near the oak")

        assert len(client.get("/api/v1/records?species=fallow deer").json()) == 1
        assert len(client.get("/api/v1/records?q=haugh").json()) == 1
        assert len(client.get("/api/v1/records?q=oak").json()) == 1
        ranged = client.get("/api/v1/records?start_date=2023-02-01&end_date=2023-08-31").json()
        assert [r["species"] for r in ranged] == ["Fallow Deer"]

    def test_pagination(self, client):
        for day in range(1, 6):
            _create(client, date=f"2023-04-0{day}")
        page = client.get("/api/v1/records?skip=1&limit=2").json()
        assert [r["date"] for r in page] == ["2023-04-04", "2023-04-03"]
        assert len(client.get("/api/v1/records?limit=0").json()) == 5

    def test_patch_grid_ref(self, client):
        record_id = _create(client).json()["id"]
        resp = client.patch(f"/api/v1/records/{record_id}", json={"grid_ref": "tg 51409 13177"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["grid_ref"] == "TG 51409 13177"
        assert data["latitude"] > 52.5

    def test_patch_clears_grid_ref(self, client):
        record_id = _create(client).json()["id"]
        data = client.patch(f"/api/v1/records/{record_id}", json={"grid_ref": ""}).json()
        assert data["grid_ref"] == ""
        assert data["latitude"] is None
        assert data["longitude"] is None

    def test_patch_invalid_grid_ref_keeps_record(self, client):
        record_id = _create(client).json()["id"]
        resp = client.patch(f"/api/v1/records/{record_id}", json={"grid_ref": "SO123"})
        assert resp.status_code == 422
        assert resp.json()["detail"]["kind"] == "odd_digit_count"
        assert client.get(f"/api/v1/records/{record_id}").json()["grid_ref"] == "SO 514 398"

    def test_patch_other_fields(self, client):
        record_id = _create(client).json()["id"]
        data = client.patch(
            f"/api/v1/records/{record_id}", json={"weight": 16.5, "date": "2023-05-01"}
        ).json()
        assert data["weight"] == 16.5
        assert data["date"] == "2023-05-01"
        assert data["grid_ref"] == "SO 514 398"

    def test_delete_record(self, client):
        record_id = _create(client).json()["id"]
        assert client.delete(f"/api/v1/records/{record_id}").status_code == 204
        assert client.get(f"/api/v1/records/{record_id}").status_code == 404
        assert client.delete(f"/api/v1/records/{record_id}").status_code == 404

    def test_clear_records(self, client):
        _create(client)
        _create(client, date="2023-04-09")
        resp = client.delete("/api/v1/records")
        assert resp.status_code == 200
        assert resp.json()["deleted"] == 2
        assert client.get("/api/v1/records").json() == []


class TestGeoEndpoint:
    def test_only_locatable_records(self, client):
        _create(client)
        _create(client, grid_ref="")
        data = client.get("/api/v1/records/geo").json()
        assert len(data) == 1
        assert data[0]["grid_ref"] == "SO 514 398"

    def test_fills_missing_coordinates(self, client, db_session):
        db_session.add(StalkingRecord(date="2023-04-08", species="Roe Deer", grid_ref="SO 514 398"))
        db_session.add(StalkingRecord(date="2023-04-09", species="Roe Deer", grid_ref="garbage"))
        db_session.commit()

        data = client.get("/api/v1/records/geo").json()
        assert len(data) == 1
        assert data[0]["latitude"] is not None

        stored = db_session.query(StalkingRecord).filter_by(grid_ref="SO 514 398").one()
        assert stored.latitude == data[0]["latitude"]

    def test_species_filter(self, client):
        _create(client)
        _create(client, species="Fallow Deer")
        data = client.get("/api/v1/records/geo?species=Fallow Deer").json()
        assert [r["species"] for r in data] == ["Fallow Deer"]


class TestGridRefEndpoint:
    def test_valid(self, client):
        resp = client.get("/api/v1/gridref/so514398")
        assert resp.status_code == 200
        data = resp.json()
        assert data["valid"] is True
        assert data["canonical"] == "SO 514 398"
        assert data["easting"] == 351400
        assert data["northing"] == 239800
        assert data["precision_metres"] == 100
        assert data["in_herefordshire"] is True
        assert data["error"] is None

    def test_outside_herefordshire(self, client):
        data = client.get("/api/v1/gridref/TG 51409 13177").json()
        assert data["valid"] is True
        assert data["in_herefordshire"] is False

    def test_invalid(self, client):
        resp = client.get("/api/v1/gridref/ZZ123456")
        assert resp.status_code == 200
        data = resp.json()
        assert data["valid"] is False
        assert data["kind"] == "unknown_grid_square"
        assert data["latitude"] is None


class TestPredictionsEndpoint:
    def test_empty(self, client):
        data = client.get("/api/v1/predictions").json()
        assert data["total_records"] == 0
        assert data["predictions"] == []

    def test_month_filter(self, client):
        _create(client, date="2023-04-08")
        _create(client, date="2023-10-16", species="Fallow Deer")
        data = client.get("/api/v1/predictions?month=october").json()
        assert data["total_records"] == 1
        assert data["species_stats"] == {"Fallow Deer": 1}

    def test_species_filter(self, client):
        _create(client, date="2023-04-08")
        _create(client, date="2023-10-16", species="Fallow Deer")
        data = client.get("/api/v1/predictions?species=Roe Deer").json()
        assert data["total_records"] == 1
        assert any(p["title"].startswith("Best Roe Deer Location") for p in data["predictions"])

    def test_species_filter_ignores_case(self, client):
        _create(client, date="2023-04-08")
        _create(client, date="2023-10-16", species="Fallow Deer")
        data = client.get("/api/v1/predictions?species=roe deer").json()
        assert data["total_records"] == 1
        best = [p for p in data["predictions"] if p["title"].startswith("Best ")]
        assert [p["title"] for p in best] == ["Best Roe Deer Location: FRITH WOODS"]
        assert best[0]["confidence"] == 90.0

    def test_unknown_month(self, client):
        assert client.get("/api/v1/predictions?month=Smarch").status_code == 422


class TestImportEndpoint:
    CSV = (
        "Ser,Date,Species,Sex,Maturity,Weight,Grid Ref,Location,Time\n"
        "1,08-Apr-23,ROE,M,Buck,14,600 393,FRITH WOOD,AM\n"
        "2,02-Jun-23,ROE,F,Fawn,8,XX 123 456,FRITH WOOD,AM\n"
    )

    def test_import(self, client):
        resp = client.post("/api/v1/import/csv", content=self.CSV)
        assert resp.status_code == 200
        data = resp.json()
        assert data["imported"] == 2
        assert data["invalid_grid_refs"] == 1
        assert data["message"] == "Imported 2 records"

        records = client.get("/api/v1/records").json()
        assert {r["grid_ref"] for r in records} == {"SO 600 393", ""}

    def test_default_square(self, client):
        client.post("/api/v1/import/csv?default_square=st", content=self.CSV)
        records = client.get("/api/v1/records").json()
        assert "ST 600 393" in {r["grid_ref"] for r in records}

    def test_latin1_body(self, client):
        body = self.CSV.replace("FRITH WOOD", "FRITH WOOD caf\xe9").encode("latin-1")
        resp = client.post("/api/v1/import/csv", content=body)
        assert resp.status_code == 200
        assert resp.json()["imported"] == 2

    def test_empty_body(self, client):
        resp = client.post("/api/v1/import/csv", content=b"")
        assert resp.status_code == 400
