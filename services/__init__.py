from flask import current_app

from .enrollment import EnrollmentService, EnrollmentView, WorkshopView
from .errors import (
    AlreadyEnrolled,
    CapacityExceeded,
    ConsistencyError,
    EnrollmentError,
    InvalidInput,
    InvalidShift,
    NotFound,
    StorageError,
)
from .guard import ConsistencyGuard, LedgerViolation
from .ledger import CapacityLedger, Reservation


def init_app(app, db):
    app.extensions['enrollment_service'] = EnrollmentService(
        db,
        single_enrollment_per_registrant=app.config.get('SINGLE_ENROLLMENT_PER_REGISTRANT', False)
    )


def get_enrollment_service():
    """Service bound to the current app."""
    return current_app.extensions['enrollment_service']


__all__ = [
    'EnrollmentService', 'EnrollmentView', 'WorkshopView',
    'ConsistencyGuard', 'LedgerViolation', 'CapacityLedger', 'Reservation',
    'EnrollmentError', 'InvalidInput', 'InvalidShift', 'NotFound', 'AlreadyEnrolled',
    'CapacityExceeded', 'StorageError', 'ConsistencyError',
    'init_app', 'get_enrollment_service',
]
