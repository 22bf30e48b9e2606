from contextlib import contextmanager
from dataclasses import dataclass

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import scoped_session

from models import Enrollment, Workshop
from models.database import READ_ONLY_OPTION
from models.enrollment import SHIFTS
from .errors import ConsistencyError, EnrollmentError, StorageError
from .ledger import CapacityLedger


@dataclass
class UnitOfWork:
    """Session and ledger shared by the steps of one operation."""
    session: scoped_session
    ledger: CapacityLedger


@dataclass(frozen=True)
class LedgerViolation:
    workshop_id: int
    shift: str
    remaining: int
    capacity: int
    enrolled: int

    @property
    def reason(self):
        if self.remaining < 0:
            return 'negative remaining seats'
        return 'seat count does not match enrollments'

    def to_dict(self):
        return {
            'workshop_id': self.workshop_id,
            'shift': self.shift,
            'remaining': self.remaining,
            'capacity': self.capacity,
            'enrolled': self.enrolled,
            'reason': self.reason
        }


class ConsistencyGuard:
    """Transaction boundary for every enrollment operation.

    A unit of work either commits with every touched seat pool satisfying

        remaining >= 0  and  capacity - remaining == enrollments in the pool

    or is rolled back completely. Database failures are logged and re-raised
    as ``StorageError`` without exposing driver messages to callers.
    """

    def __init__(self, db):
        self.db = db

    @contextmanager
    def transaction(self, operation, readonly=False):
        session = self.db.session
        uow = UnitOfWork(session=session, ledger=CapacityLedger(session))
        try:
            if readonly and not session.in_transaction():
                session.connection(execution_options={READ_ONLY_OPTION: True})
            yield uow
            if readonly:
                session.rollback()
                return
            session.flush()
            violations = self._check_pools(session, uow.ledger.touched)
            if violations:
                current_app.logger.error(
                    f'{operation}: aborting, ledger invariant violated: '
                    f'{[v.to_dict() for v in violations]}'
                )
                raise ConsistencyError()
            session.commit()
        except EnrollmentError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            current_app.logger.exception(f'{operation}: storage failure: {e.__class__.__name__}')
            raise StorageError() from e
        except Exception:
            session.rollback()
            raise

    def audit(self):
        """Check every workshop and shift; return the violations found."""
        with self.transaction('audit', readonly=True) as uow:
            pools = [
                (workshop_id, shift)
                for (workshop_id,) in uow.session.query(Workshop.id).order_by(Workshop.id)
                for shift in SHIFTS
            ]
            return self._check_pools(uow.session, pools)

    def _check_pools(self, session, pools):
        violations = []
        for workshop_id, shift in sorted(pools):
            row = (
                session.query(Workshop.seats_column(shift), Workshop.capacity_column(shift))
                .filter(Workshop.id == workshop_id)
                .first()
            )
            if row is None:
                continue
            remaining, capacity = row
            enrolled = (
                session.query(Enrollment)
                .filter_by(workshop_id=workshop_id, shift=shift)
                .count()
            )
            if remaining < 0 or capacity - remaining != enrolled:
                violations.append(LedgerViolation(workshop_id, shift, remaining, capacity, enrolled))
        return violations
