# tests/test_guard.py

import pytest
from sqlalchemy.exc import OperationalError

from models import db, Enrollment, Workshop
from services import ConsistencyError, StorageError
from helpers import remaining, seed_one


def corrupt_remaining_seats(workshop_id, seats_shift1):
    Workshop.query.filter_by(id=workshop_id).update({'seats_shift1': seats_shift1})
    db.session.commit()


def test_audit_reports_drifted_pool(service):
    workshop_id = seed_one(service, seats_shift1=2)
    assert service.audit() == []

    corrupt_remaining_seats(workshop_id, 1)

    [violation] = service.audit()
    assert (violation.workshop_id, violation.shift) == (workshop_id, 'shift1')
    assert (violation.remaining, violation.capacity, violation.enrolled) == (1, 2, 0)
    assert violation.reason == 'seat count does not match enrollments'


def test_commit_refused_when_touched_pool_is_inconsistent(service):
    workshop_id = seed_one(service, seats_shift1=2)
    corrupt_remaining_seats(workshop_id, 1)

    with pytest.raises(ConsistencyError):
        service.enroll('alice@x.com', 'Alice', workshop_id, 'shift1')

    assert remaining(service, workshop_id) == (1, 0)
    assert Enrollment.query.count() == 0


def test_storage_failure_rolls_back_and_hides_details(service):
    with pytest.raises(StorageError) as excinfo:
        with service.guard.transaction('test') as uow:
            uow.session.add(Workshop(name='X', seats_shift1=1, capacity_shift1=1))
            uow.session.flush()
            raise OperationalError('UPDATE workshops SET seats_shift1 = 0', {}, Exception('database is locked'))

    assert 'UPDATE' not in str(excinfo.value)
    assert excinfo.value.to_dict()['kind'] == 'storage_error'
    assert service.list_workshops() == []


def test_unexpected_error_rolls_back(service):
    with pytest.raises(RuntimeError):
        with service.guard.transaction('test') as uow:
            uow.session.add(Workshop(name='X', seats_shift1=1, capacity_shift1=1))
            uow.session.flush()
            raise RuntimeError('boom')

    assert service.list_workshops() == []


def test_readonly_unit_does_not_persist(service):
    with service.guard.transaction('test', readonly=True) as uow:
        uow.session.add(Workshop(name='X', seats_shift1=1, capacity_shift1=1))
        uow.session.flush()

    assert service.list_workshops() == []


def test_check_ledger_command(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['seed-workshops'])
    assert result.exit_code == 0
    assert 'Inserted 6 workshops.' in result.output

    result = runner.invoke(args=['check-ledger'])
    assert result.exit_code == 0
    assert 'consistent' in result.output

    with app.app_context():
        first = Workshop.query.order_by(Workshop.id).first()
        corrupt_remaining_seats(first.id, first.seats_shift1 - 1)

    result = runner.invoke(args=['check-ledger'])
    assert result.exit_code == 1

    result = runner.invoke(args=['fresh'])
    assert result.exit_code == 0
    result = runner.invoke(args=['check-ledger'])
    assert result.exit_code == 0
