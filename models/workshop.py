from .database import db
from .enrollment import SHIFT1, SHIFT2


class Workshop(db.Model):
    """Workshop offering with an independent seat pool per shift.

    ``seats_shift*`` hold the *remaining* seats and are decremented/incremented
    in place. ``capacity_shift*`` keep the seeded values and never change.
    """

    __tablename__ = 'workshops'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(200), nullable=True)
    seats_shift1 = db.Column(db.Integer, nullable=False, default=0)
    seats_shift2 = db.Column(db.Integer, nullable=False, default=0)
    capacity_shift1 = db.Column(db.Integer, nullable=False, default=0)
    capacity_shift2 = db.Column(db.Integer, nullable=False, default=0)

    enrollments = db.relationship('Enrollment', backref='workshop', lazy='dynamic')

    __table_args__ = (
        db.CheckConstraint('seats_shift1 >= 0', name='ck_workshops_seats_shift1_non_negative'),
        db.CheckConstraint('seats_shift2 >= 0', name='ck_workshops_seats_shift2_non_negative'),
    )

    def __repr__(self):
        return f'<Workshop {self.name} - {self.location}>'

    @staticmethod
    def seats_column(shift):
        """Remaining-seat column for a canonical shift, or None."""
        return {SHIFT1: Workshop.seats_shift1, SHIFT2: Workshop.seats_shift2}.get(shift)

    @staticmethod
    def capacity_column(shift):
        return {SHIFT1: Workshop.capacity_shift1, SHIFT2: Workshop.capacity_shift2}.get(shift)
