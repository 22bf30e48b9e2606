from datetime import datetime
from .database import db


SHIFT1 = 'shift1'
SHIFT2 = 'shift2'
SHIFTS = (SHIFT1, SHIFT2)

# Names the public API has always used for the two shifts
SHIFT_ALIASES = {
    'turno1': SHIFT1,
    'turno2': SHIFT2,
}

SHIFT_LABELS = {
    SHIFT1: '9:30–11:30',
    SHIFT2: '11:30–13:30',
}


class Enrollment(db.Model):
    """Binding of one registrant to one workshop in one shift."""

    __tablename__ = 'enrollments'

    id = db.Column(db.Integer, primary_key=True)
    registrant_id = db.Column(db.Integer, db.ForeignKey('registrants.id'), nullable=False, index=True)
    workshop_id = db.Column(db.Integer, db.ForeignKey('workshops.id'), nullable=False, index=True)
    shift = db.Column(db.String(10), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('registrant_id', 'workshop_id', name='uq_enrollments_registrant_workshop'),
        db.CheckConstraint("shift IN ('shift1', 'shift2')", name='ck_enrollments_shift'),
    )

    def __repr__(self):
        return f'<Enrollment {self.id} - Registrant {self.registrant_id} Workshop {self.workshop_id} {self.shift}>'


def parse_shift(value):
    """Return the canonical shift for ``value`` (aliases accepted), or None."""
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    if value in SHIFTS:
        return value
    return SHIFT_ALIASES.get(value)


def get_shift_label(shift):
    """Get the human-readable time range for a shift."""
    return SHIFT_LABELS.get(shift, shift)
