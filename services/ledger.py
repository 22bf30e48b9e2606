import enum

from models import Workshop
from models.enrollment import SHIFTS
from .errors import InvalidShift, NotFound


class Reservation(enum.Enum):
    RESERVED = 'reserved'
    EXHAUSTED = 'exhausted'


class CapacityLedger:
    """Remaining-seat counters, one pool per (workshop, shift).

    Every mutation is a single conditional UPDATE evaluated by the database,
    so check-and-decrement can never be split by a concurrent request. Pools
    touched through this ledger are remembered so the surrounding transaction
    can verify them before commit.
    """

    def __init__(self, session):
        self.session = session
        self.touched = set()

    def try_reserve(self, workshop_id, shift):
        seats = _seats_column(shift)
        updated = (
            self.session.query(Workshop)
            .filter(Workshop.id == workshop_id, seats > 0)
            .update({seats: seats - 1}, synchronize_session=False)
        )
        if updated:
            self.touched.add((workshop_id, shift))
            return Reservation.RESERVED

        if not self._exists(workshop_id):
            raise NotFound('Oficina não encontrada')
        return Reservation.EXHAUSTED

    def release(self, workshop_id, shift):
        seats = _seats_column(shift)
        updated = (
            self.session.query(Workshop)
            .filter(Workshop.id == workshop_id)
            .update({seats: seats + 1}, synchronize_session=False)
        )
        if not updated:
            raise NotFound('Oficina não encontrada')
        self.touched.add((workshop_id, shift))

    def remaining(self, workshop_id, shift):
        seats = _seats_column(shift)
        value = self.session.query(seats).filter(Workshop.id == workshop_id).scalar()
        if value is None:
            raise NotFound('Oficina não encontrada')
        return value

    def _exists(self, workshop_id):
        return self.session.query(Workshop.id).filter(Workshop.id == workshop_id).first() is not None


def _seats_column(shift):
    if shift not in SHIFTS:
        raise InvalidShift()
    return Workshop.seats_column(shift)
