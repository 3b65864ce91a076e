import threading
import unittest
from datetime import timedelta

from roombook.database import SessionLocal
from roombook.models import Booking
from roombook.services import availability
from roombook.services.availability import (
    KeyedLocks, auditory_lock, find_active_booking, is_auditory_free, reserve_auditory,
)
from roombook.utils.clock import utcnow
from tests.base import ApiTestCase, DatabaseTestCase, iso_in


class TestActiveBookingLookup(DatabaseTestCase):

    def setUp(self):
        super().setUp()
        self.device_id = self.make_device()
        self.room_id = self.make_auditory()
        self.now = utcnow()

    def test_empty_room_is_free(self):
        with SessionLocal() as db:
            self.assertTrue(is_auditory_free(db, self.room_id, self.now))

    def test_active_booking_blocks(self):
        booking_id = self.make_booking(self.device_id, self.room_id,
                                       self.now - timedelta(minutes=5), self.now + timedelta(hours=1))
        with SessionLocal() as db:
            self.assertFalse(is_auditory_free(db, self.room_id, self.now))
            self.assertEqual(find_active_booking(db, self.room_id, self.now).id, booking_id)

    def test_booking_ending_exactly_now_is_not_active(self):
        self.make_booking(self.device_id, self.room_id, self.now - timedelta(hours=1), self.now)
        with SessionLocal() as db:
            self.assertTrue(is_auditory_free(db, self.room_id, self.now))

    def test_excluded_booking_is_ignored(self):
        booking_id = self.make_booking(self.device_id, self.room_id,
                                       self.now, self.now + timedelta(hours=1))
        with SessionLocal() as db:
            self.assertTrue(is_auditory_free(db, self.room_id, self.now, exclude_booking_id=booking_id))

    def test_other_room_does_not_block(self):
        other = self.make_auditory("102")
        self.make_booking(self.device_id, other, self.now, self.now + timedelta(hours=1))
        with SessionLocal() as db:
            self.assertTrue(is_auditory_free(db, self.room_id, self.now))

    def test_reserve_yields_room_or_none(self):
        with SessionLocal() as db:
            with reserve_auditory(db, self.room_id) as room:
                self.assertEqual(room.id, self.room_id)
            with reserve_auditory(db, "missing") as room:
                self.assertIsNone(room)


class TestKeyedLocks(unittest.TestCase):

    def test_entry_is_dropped_after_release(self):
        locks = KeyedLocks()
        with locks.hold("a"):
            self.assertTrue(locks.locked("a"))
            self.assertFalse(locks.locked("b"))
            self.assertEqual(len(locks), 1)
        self.assertFalse(locks.locked("a"))
        self.assertEqual(len(locks), 0)

    def test_entry_is_dropped_when_the_block_raises(self):
        locks = KeyedLocks()
        with self.assertRaises(RuntimeError):
            with locks.hold("a"):
                raise RuntimeError("boom")
        self.assertEqual(len(locks), 0)

    def test_auditory_lock_is_held_per_room(self):
        entered = threading.Event()
        release = threading.Event()
        waiter_done = threading.Event()

        def holder():
            with auditory_lock("room-x"):
                entered.set()
                release.wait(5)

        def waiter():
            with auditory_lock("room-x"):
                waiter_done.set()

        t = threading.Thread(target=holder)
        w = threading.Thread(target=waiter)
        t.start()
        try:
            self.assertTrue(entered.wait(5))
            w.start()
            self.assertTrue(availability._auditory_locks.locked("room-x"))
            self.assertFalse(availability._auditory_locks.locked("room-y"))
            self.assertFalse(waiter_done.wait(0.2))
        finally:
            release.set()
            t.join(5)
            w.join(5)
        self.assertTrue(waiter_done.is_set())
        self.assertFalse(availability._auditory_locks.locked("room-x"))


class TestLockRegistryStaysBounded(ApiTestCase):

    def test_unknown_auditories_leave_no_locks_behind(self):
        device = self.post_device()
        room = self.post_auditory()
        booking = self.post_booking(device["id"], room["id"], iso_in(hours=1)).json()
        before = len(availability._auditory_locks)
        for i in range(50):
            r = self.post_booking(device["id"], f"missing-{i}", iso_in(hours=1))
            self.assertEqual(r.status_code, 404)
            r = self.client.put(f"/api/bookings/{booking['id']}", json={"auditoryId": f"missing-{i}"})
            self.assertEqual(r.status_code, 404)
        self.assertEqual(len(availability._auditory_locks), before)


class TestBookingActiveState(unittest.TestCase):

    def test_naive_end_time_is_read_as_utc(self):
        now = utcnow()
        b = Booking(endTime=(now + timedelta(minutes=1)).replace(tzinfo=None))
        self.assertTrue(b.is_active(now))
        self.assertFalse(b.is_active(now + timedelta(minutes=1)))
