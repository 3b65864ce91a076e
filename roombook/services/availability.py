"""
Active-booking lookups for an auditory, plus the per-auditory critical
section that makes "check, then insert" atomic for concurrent writers.

A booking is active while endTime > now. At most one active booking may
exist per auditory. Callers sample `now` once per operation and pass it in.
"""
import threading
from contextlib import contextmanager
from datetime import datetime
from sqlalchemy.orm import Session

from roombook.models.auditory import Auditory
from roombook.models.booking import Booking


def find_active_booking(
    db: Session,
    auditory_id: str,
    now: datetime,
    exclude_booking_id: str | None = None,
) -> Booking | None:
    """Return the booking currently holding `auditory_id`, if any."""
    q = db.query(Booking).filter(
        Booking.auditoryId == auditory_id,
        Booking.endTime > now,
    )
    if exclude_booking_id:
        q = q.filter(Booking.id != exclude_booking_id)
    return q.order_by(Booking.endTime.desc()).first()


def is_auditory_free(
    db: Session,
    auditory_id: str,
    now: datetime,
    exclude_booking_id: str | None = None,
) -> bool:
    return find_active_booking(db, auditory_id, now, exclude_booking_id) is None


# ─── Per-auditory mutual exclusion ────────────────────────────────────────────
class KeyedLocks:
    """
    One lock per key while anyone holds or waits for it. Entries are dropped
    when the last holder leaves, so the registry only ever contains keys that
    are in use right now.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, list] = {}    # key -> [lock, users]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def locked(self, key: str) -> bool:
        with self._guard:
            entry = self._locks.get(key)
            return entry is not None and entry[0].locked()

    @contextmanager
    def hold(self, key: str):
        with self._guard:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]


_auditory_locks = KeyedLocks()


def auditory_lock(auditory_id: str):
    """Serialize writers within this process for one auditory."""
    return _auditory_locks.hold(auditory_id)


def lock_auditory_row(db: Session, auditory_id: str) -> Auditory | None:
    """
    SELECT ... FOR UPDATE on the auditory row. On PostgreSQL this serializes
    booking writers for the same auditory across processes until the current
    transaction ends. SQLite has no row locks and compiles it away.
    """
    return (
        db.query(Auditory)
        .filter(Auditory.id == auditory_id)
        .with_for_update()
        .first()
    )


@contextmanager
def reserve_auditory(db: Session, auditory_id: str):
    """
    Hold both locks for `auditory_id` around a check-then-write block and
    yield the locked Auditory (None if it does not exist). The caller commits
    inside the block; on error the transaction is rolled back before the
    process lock is released.
    """
    with auditory_lock(auditory_id):
        try:
            yield lock_auditory_row(db, auditory_id)
        except Exception:
            db.rollback()
            raise
