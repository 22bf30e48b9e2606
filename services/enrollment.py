"""Enrollment operations: enroll, transfer, list, seed and reset.

Each operation runs as one ``ConsistencyGuard`` transaction, so a failure at
any step leaves the registrants, workshops and seat counters exactly as they
were before the call.
"""

from dataclasses import dataclass
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from models import Enrollment, Registrant, Workshop
from models.enrollment import get_shift_label, parse_shift
from .errors import AlreadyEnrolled, CapacityExceeded, InvalidInput, InvalidShift, NotFound
from .guard import ConsistencyGuard
from .ledger import Reservation

# Largest value a signed 64-bit primary key column can hold
MAX_ID = 2 ** 63 - 1


@dataclass(frozen=True)
class EnrollmentView:
    registrant_name: str
    registrant_email: str
    workshop_name: str
    location: Optional[str]
    shift: str
    shift_label: str


@dataclass(frozen=True)
class WorkshopView:
    id: int
    name: str
    location: Optional[str]
    seats_shift1: int
    seats_shift2: int
    capacity_shift1: int
    capacity_shift2: int

    @classmethod
    def from_model(cls, workshop: Workshop) -> 'WorkshopView':
        return cls(
            id=workshop.id,
            name=workshop.name,
            location=workshop.location,
            seats_shift1=workshop.seats_shift1,
            seats_shift2=workshop.seats_shift2,
            capacity_shift1=workshop.capacity_shift1,
            capacity_shift2=workshop.capacity_shift2,
        )


class EnrollmentService:
    def __init__(self, db, single_enrollment_per_registrant: bool = False):
        self.guard = ConsistencyGuard(db)
        self.single_enrollment_per_registrant = single_enrollment_per_registrant

    # ------------------------------------------------------------------
    # Enrollment
    # ------------------------------------------------------------------

    def enroll(self, email: str, name: str, workshop_id: int, shift: str) -> Enrollment:
        """Enroll ``email`` into one shift of a workshop, consuming one seat.

        The registrant is created on first sight of the email. Fails with
        ``AlreadyEnrolled`` if the registrant already holds a seat in this
        workshop (or anywhere, under the single-enrollment policy) and with
        ``CapacityExceeded`` if the shift has no seats left.
        """
        shift = _validate_shift(shift)
        email = _validate_email(email)
        name = _validate_text(name, 'nome')
        workshop_id = _validate_id(workshop_id, 'oficina_id')

        with self.guard.transaction('enroll') as uow:
            registrant = self._resolve_registrant(uow.session, email, name)

            if self.single_enrollment_per_registrant:
                # Row lock serializes concurrent enrolls of one registrant
                Registrant.query.filter_by(id=registrant.id).with_for_update().one()

            if Enrollment.query.filter_by(registrant_id=registrant.id, workshop_id=workshop_id).first():
                current_app.logger.warning(f'enroll: {email} already enrolled in workshop {workshop_id}')
                raise AlreadyEnrolled()
            if self.single_enrollment_per_registrant and \
                    Enrollment.query.filter_by(registrant_id=registrant.id).first():
                current_app.logger.warning(f'enroll: {email} already holds an enrollment')
                raise AlreadyEnrolled('Usuário já possui uma inscrição')

            if uow.ledger.try_reserve(workshop_id, shift) is Reservation.EXHAUSTED:
                current_app.logger.warning(f'enroll: workshop {workshop_id} {shift} is full')
                raise CapacityExceeded()

            enrollment = Enrollment(registrant_id=registrant.id, workshop_id=workshop_id, shift=shift)
            self._insert_enrollment(uow.session, enrollment)

        current_app.logger.info(f'enroll: {email} -> workshop {workshop_id} {shift}')
        return enrollment

    def transfer(self, email: str, new_workshop_id: int, new_shift: str,
                 from_workshop_id: Optional[int] = None) -> Enrollment:
        """Move a registrant's enrollment to another workshop and/or shift.

        The destination seat is reserved before the old one is released, so a
        full destination leaves the current enrollment untouched.
        """
        new_shift = _validate_shift(new_shift)
        email = _validate_email(email)
        new_workshop_id = _validate_id(new_workshop_id, 'nova_oficina_id')
        if from_workshop_id is not None:
            from_workshop_id = _validate_id(from_workshop_id, 'oficina_atual_id')

        with self.guard.transaction('transfer') as uow:
            registrant = Registrant.query.filter_by(email=email).first()
            if not registrant:
                raise NotFound('Usuário não encontrado')
            if self.single_enrollment_per_registrant:
                Registrant.query.filter_by(id=registrant.id).with_for_update().one()

            current = self._current_enrollment(registrant, from_workshop_id)
            old_workshop_id, old_shift = current.workshop_id, current.shift

            if old_workshop_id == new_workshop_id:
                if old_shift == new_shift:
                    raise AlreadyEnrolled('Usuário já inscrito nessa oficina e turno')
            elif Enrollment.query.filter_by(registrant_id=registrant.id, workshop_id=new_workshop_id).first():
                raise AlreadyEnrolled()

            if uow.ledger.try_reserve(new_workshop_id, new_shift) is Reservation.EXHAUSTED:
                current_app.logger.warning(f'transfer: workshop {new_workshop_id} {new_shift} is full')
                raise CapacityExceeded('Limite de vagas atingido na nova oficina')

            # The old row must be gone before the new one is inserted: moving
            # between shifts of one workshop reuses the (registrant, workshop) key.
            uow.session.delete(current)
            uow.session.flush()
            uow.ledger.release(old_workshop_id, old_shift)

            enrollment = Enrollment(registrant_id=registrant.id, workshop_id=new_workshop_id, shift=new_shift)
            self._insert_enrollment(uow.session, enrollment)

        current_app.logger.info(
            f'transfer: {email} workshop {old_workshop_id} {old_shift} -> '
            f'workshop {new_workshop_id} {new_shift}'
        )
        return enrollment

    def _resolve_registrant(self, session, email, name):
        registrant = Registrant.query.filter_by(email=email).first()
        if registrant:
            return registrant

        registrant = Registrant(email=email, name=name)
        try:
            with session.begin_nested():
                session.add(registrant)
        except IntegrityError:
            # A concurrent request created the same email first
            registrant = Registrant.query.filter_by(email=email).first()
            if registrant is None:
                raise
        return registrant

    def _insert_enrollment(self, session, enrollment):
        try:
            with session.begin_nested():
                session.add(enrollment)
        except IntegrityError:
            raise AlreadyEnrolled()

    def _current_enrollment(self, registrant, from_workshop_id):
        query = Enrollment.query.filter_by(registrant_id=registrant.id)
        if from_workshop_id is not None:
            enrollment = query.filter_by(workshop_id=from_workshop_id).first()
            if not enrollment:
                raise NotFound('Inscrição atual não encontrada')
            return enrollment

        enrollments = query.order_by(Enrollment.id).limit(2).all()
        if not enrollments:
            raise NotFound('Inscrição atual não encontrada')
        if len(enrollments) > 1:
            raise InvalidInput('Usuário possui mais de uma inscrição; informe oficina_atual_id')
        return enrollments[0]

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_enrollments(self) -> List[EnrollmentView]:
        with self.guard.transaction('list_enrollments', readonly=True) as uow:
            rows = (
                uow.session.query(
                    Registrant.name, Registrant.email, Workshop.name, Workshop.location, Enrollment.shift
                )
                .select_from(Enrollment)
                .join(Registrant, Registrant.id == Enrollment.registrant_id)
                .join(Workshop, Workshop.id == Enrollment.workshop_id)
                .order_by(Enrollment.id)
                .all()
            )
            return [
                EnrollmentView(
                    registrant_name=registrant_name,
                    registrant_email=registrant_email,
                    workshop_name=workshop_name,
                    location=location,
                    shift=shift,
                    shift_label=get_shift_label(shift),
                )
                for registrant_name, registrant_email, workshop_name, location, shift in rows
            ]

    def list_workshops(self) -> List[WorkshopView]:
        with self.guard.transaction('list_workshops', readonly=True):
            return [WorkshopView.from_model(w) for w in Workshop.query.order_by(Workshop.id).all()]

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def seed(self, workshops) -> List[WorkshopView]:
        """Insert workshops as given. Repeated calls create duplicates."""
        if not isinstance(workshops, list):
            raise InvalidInput('Esperada uma lista de oficinas')
        specs = [_validate_workshop_spec(spec, index) for index, spec in enumerate(workshops)]

        with self.guard.transaction('seed') as uow:
            created = [
                Workshop(
                    name=spec['name'],
                    location=spec['location'],
                    seats_shift1=spec['seats_shift1'],
                    seats_shift2=spec['seats_shift2'],
                    capacity_shift1=spec['seats_shift1'],
                    capacity_shift2=spec['seats_shift2'],
                )
                for spec in specs
            ]
            uow.session.add_all(created)
            uow.session.flush()
            views = [WorkshopView.from_model(w) for w in created]

        current_app.logger.info(f'seed: inserted {len(views)} workshops')
        return views

    def reset(self) -> dict:
        """Delete every enrollment, registrant and workshop in one transaction."""
        with self.guard.transaction('reset'):
            counts = {
                'enrollments': Enrollment.query.delete(),
                'registrants': Registrant.query.delete(),
                'workshops': Workshop.query.delete(),
            }

        current_app.logger.info(f'reset: deleted {counts}')
        return counts

    def audit(self):
        return self.guard.audit()


def _validate_shift(shift):
    canonical = parse_shift(shift)
    if canonical is None:
        raise InvalidShift()
    return canonical


def _validate_email(email):
    email = _validate_text(email, 'email').lower()
    if '@' not in email:
        raise InvalidInput('email inválido')
    return email


def _validate_text(value, field):
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f'{field} é obrigatório')
    return value.strip()


def _validate_id(value, field):
    """Accept a positive integer, or a string of ASCII digits, that fits a BIGINT."""
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdigit()):
            raise InvalidInput(f'{field} inválido')
        value = int(value)
    elif isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f'{field} inválido')
    if not 1 <= value <= MAX_ID:
        raise InvalidInput(f'{field} inválido')
    return value


def _validate_seats(value, field, index):
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInput(f'oficina {index}: {field} deve ser um inteiro não negativo')
    return value


def _validate_workshop_spec(spec, index):
    if not isinstance(spec, dict):
        raise InvalidInput(f'oficina {index}: formato inválido')
    name = spec.get('name')
    if not isinstance(name, str) or not name.strip():
        raise InvalidInput(f'oficina {index}: nome é obrigatório')
    location = spec.get('location')
    if location is not None and not isinstance(location, str):
        raise InvalidInput(f'oficina {index}: local inválido')
    return {
        'name': name.strip(),
        'location': location,
        'seats_shift1': _validate_seats(spec.get('seats_shift1'), 'limite_turno1', index),
        'seats_shift2': _validate_seats(spec.get('seats_shift2'), 'limite_turno2', index),
    }
