"""Tests for /api/animal-pins: placement, listing, deletion, status codes."""
from __future__ import annotations

import random

import pytest
from sqlalchemy.exc import OperationalError

from db.models import AnimalPin, CameraPin
from placement import PinPlacementEngine, RepositoryUnavailableError
from placement.geo_utils import destination_point, haversine_distance


def _payload(**overrides) -> dict:
    defaults = {
        "animal_type": "dog",
        "stray_status": "stray",
        "camera": "gate-1",
        "detection_id": "det-1",
    }
    defaults.update(overrides)
    return defaults


@pytest.fixture()
def seeded_engine():
    import api

    api.app.dependency_overrides[api.get_placement_engine] = lambda: PinPlacementEngine(rng=random.Random(0))
    yield
    api.app.dependency_overrides.pop(api.get_placement_engine, None)


# ---------- Create ----------

class TestCreateAnimalPin:
    def test_returns_201_with_pin(self, client, auth_headers, camera_pin):
        resp = client.post("/api/animal-pins", json=_payload(), headers=auth_headers)

        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        pin = body["pin"]
        assert pin["animal_type"] == "dog"
        assert pin["stray_status"] == "stray"
        assert pin["camera_pin_id"] == camera_pin.id
        assert pin["user_map_id"] == camera_pin.user_map_id
        assert pin["detection_id"] == "det-1"
        assert pin["camera"] == "gate-1"

    def test_first_pin_straight_ahead(self, client, auth_headers, camera_pin):
        pin = client.post("/api/animal-pins", json=_payload(), headers=auth_headers).json()["pin"]

        lat, lon = destination_point(14.5995, 120.9842, 90.0, 5.0)
        assert pin["latitude"] == pytest.approx(lat, abs=1e-9)
        assert pin["longitude"] == pytest.approx(lon, abs=1e-9)

    def test_following_pins_keep_separation(self, client, auth_headers, camera_pin, seeded_engine):
        pins = []
        for n in range(4):
            resp = client.post("/api/animal-pins", json=_payload(detection_id=f"det-{n}"), headers=auth_headers)
            assert resp.status_code == 201
            pins.append(resp.json()["pin"])

        for i, a in enumerate(pins):
            for b in pins[i + 1:]:
                sep = haversine_distance(a["latitude"], a["longitude"], b["latitude"], b["longitude"])
                assert sep >= 2.0

    def test_without_camera_stores_null_coordinates(self, client, auth_headers, user_map):
        resp = client.post(
            "/api/animal-pins",
            json=_payload(camera=None, user_map_id=user_map.id),
            headers=auth_headers,
        )

        assert resp.status_code == 201
        pin = resp.json()["pin"]
        assert pin["latitude"] is None
        assert pin["longitude"] is None
        assert pin["camera_pin_id"] is None
        assert pin["user_map_id"] == user_map.id

    def test_without_camera_unknown_map_returns_422(self, client, auth_headers):
        resp = client.post(
            "/api/animal-pins",
            json=_payload(camera="", user_map_id=12345),
            headers=auth_headers,
        )
        assert resp.status_code == 422

    def test_unknown_camera_returns_404(self, client, auth_headers, camera_pin, db_session):
        resp = client.post("/api/animal-pins", json=_payload(camera="gate-9"), headers=auth_headers)

        assert resp.status_code == 404
        assert db_session.query(AnimalPin).count() == 0

    def test_duplicate_detection_returns_409(self, client, auth_headers, camera_pin):
        client.post("/api/animal-pins", json=_payload(detection_id="dup"), headers=auth_headers)
        resp = client.post("/api/animal-pins", json=_payload(detection_id="dup"), headers=auth_headers)
        assert resp.status_code == 409

    def test_repository_failure_returns_503(self, client, auth_headers, camera_pin, monkeypatch):
        def _boom(self, camera_id):
            raise RepositoryUnavailableError("pin store timed out") from OperationalError(
                "SELECT animal_pins.id FROM animal_pins", {}, Exception("statement timeout")
            )

        monkeypatch.setattr("db.repositories.SqlPinRepository.list_by_camera", _boom)

        resp = client.post("/api/animal-pins", json=_payload(), headers=auth_headers)

        assert resp.status_code == 503
        assert resp.json() == {"detail": "Pin storage unavailable"}

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_detection_id_is_not_unique_key(self, client, auth_headers, camera_pin, blank):
        first = client.post("/api/animal-pins", json=_payload(detection_id=blank), headers=auth_headers)
        second = client.post("/api/animal-pins", json=_payload(detection_id=blank), headers=auth_headers)

        assert (first.status_code, second.status_code) == (201, 201)
        assert first.json()["pin"]["detection_id"] is None
        assert second.json()["pin"]["detection_id"] is None

    def test_camera_with_negative_direction(self, client, auth_headers, db_session, user_map):
        camera = CameraPin(
            hls_url="http://cctv.local:8888/cam-neg/index.m3u8",
            latitude=14.5995,
            longitude=120.9842,
            direction=-90,
            user_map_id=user_map.id,
        )
        db_session.add(camera)
        db_session.commit()

        resp = client.post("/api/animal-pins", json=_payload(camera="cam-neg"), headers=auth_headers)

        assert resp.status_code == 201
        pin = resp.json()["pin"]
        lat, lon = destination_point(14.5995, 120.9842, 270.0, 5.0)
        assert pin["latitude"] == pytest.approx(lat, abs=1e-9)
        assert pin["longitude"] == pytest.approx(lon, abs=1e-9)

    def test_missing_animal_type_returns_422(self, client, auth_headers, camera_pin):
        payload = _payload()
        del payload["animal_type"]
        resp = client.post("/api/animal-pins", json=payload, headers=auth_headers)
        assert resp.status_code == 422


# ---------- List ----------

class TestListAnimalPins:
    def test_missing_user_map_id_returns_400(self, client, auth_headers):
        resp = client.get("/api/animal-pins", headers=auth_headers)
        assert resp.status_code == 400

    def test_returns_pins_of_map(self, client, auth_headers, camera_pin, user_map):
        client.post("/api/animal-pins", json=_payload(detection_id="a"), headers=auth_headers)
        client.post("/api/animal-pins", json=_payload(detection_id="b"), headers=auth_headers)

        resp = client.get("/api/animal-pins", params={"user_map_id": user_map.id}, headers=auth_headers)

        assert resp.status_code == 200
        assert [p["detection_id"] for p in resp.json()] == ["a", "b"]

    def test_other_map_is_empty(self, client, auth_headers, camera_pin, user_map):
        client.post("/api/animal-pins", json=_payload(), headers=auth_headers)
        resp = client.get("/api/animal-pins", params={"user_map_id": user_map.id + 1}, headers=auth_headers)
        assert resp.json() == []


# ---------- Delete ----------

class TestDeleteAnimalPin:
    def test_deletes(self, client, auth_headers, camera_pin, db_session):
        pin_id = client.post("/api/animal-pins", json=_payload(), headers=auth_headers).json()["pin"]["id"]

        resp = client.delete(f"/api/animal-pins/{pin_id}", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert db_session.get(AnimalPin, pin_id) is None

    def test_not_found_returns_404(self, client, auth_headers):
        resp = client.delete("/api/animal-pins/999", headers=auth_headers)
        assert resp.status_code == 404
