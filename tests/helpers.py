def seed_one(service, seats_shift1=1, seats_shift2=0, name='A', location='Room1'):
    """Seed a single workshop and return its id."""
    [workshop] = service.seed([{
        'name': name,
        'location': location,
        'seats_shift1': seats_shift1,
        'seats_shift2': seats_shift2,
    }])
    return workshop.id


def remaining(service, workshop_id):
    workshop = next(w for w in service.list_workshops() if w.id == workshop_id)
    return workshop.seats_shift1, workshop.seats_shift2


def enrollment_rows(service):
    return [(e.registrant_email, e.workshop_name, e.shift) for e in service.list_enrollments()]
