from datetime import timedelta
from unittest import mock

from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from roombook.database import SessionLocal
from roombook.models import Device
from roombook.utils.clock import utcnow
from tests.base import ApiTestCase, DatabaseTestCase


class TestProblemDocuments(ApiTestCase):

    def test_unknown_route(self):
        body = self.assertProblem(self.client.get("/api/nothing-here"), 404)
        self.assertEqual(body["type"], "about:blank")
        self.assertEqual(body["title"], "Not Found")
        self.assertEqual(body["instance"], "/api/nothing-here")

    def test_method_not_allowed(self):
        self.assertProblem(self.client.patch("/api/devices"), 405)

    def test_invalid_json_body(self):
        r = self.client.post("/api/devices", content=b"{not json",
                             headers={"content-type": "application/json"})
        body = self.assertProblem(r, 400, "validation-error")
        self.assertTrue(body["errorsText"])

    def test_unexpected_error_does_not_leak_details(self):
        client = TestClient(self.app, raise_server_exceptions=False)
        with mock.patch("roombook.services.device_service.device_service.list_devices",
                        side_effect=RuntimeError("password=hunter2")):
            r = client.get("/api/devices")
        body = self.assertProblem(r, 500, "internal-server-error")
        self.assertNotIn("hunter2", r.text)
        self.assertEqual(body["title"], "Internal Server Error")
        self.assertEqual(r.headers["x-content-type-options"], "nosniff")
        self.assertEqual(r.headers["x-frame-options"], "SAMEORIGIN")

    def test_integrity_error_maps_to_409(self):
        orig = Exception("violates foreign key constraint")
        with mock.patch("roombook.services.device_service.device_service.create_device",
                        side_effect=IntegrityError("INSERT", {}, orig)):
            r = self.client.post("/api/devices", json={"name": "x"})
        body = self.assertProblem(r, 409, "integrity-error")
        self.assertNotIn("foreign key", body["detail"])

    def test_security_headers(self):
        r = self.client.get("/api/devices")
        self.assertEqual(r.headers["x-content-type-options"], "nosniff")
        self.assertEqual(r.headers["x-frame-options"], "SAMEORIGIN")


class TestHealth(ApiTestCase):

    def test_ok(self):
        r = self.client.get("/api/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"ok": True})

    def test_store_unreachable(self):
        with mock.patch("roombook.api.v1.health.check_db_connection", return_value=False):
            r = self.client.get("/api/health")
        self.assertEqual(r.status_code, 503)
        self.assertEqual(r.json(), {"ok": False})


class TestReferentialIntegrity(DatabaseTestCase):

    def test_store_refuses_to_orphan_bookings(self):
        device_id = self.make_device()
        auditory_id = self.make_auditory()
        now = utcnow()
        self.make_booking(device_id, auditory_id, now, now + timedelta(hours=1))

        with SessionLocal() as db:
            db.delete(db.get(Device, device_id))
            with self.assertRaises(IntegrityError):
                db.commit()
            db.rollback()
