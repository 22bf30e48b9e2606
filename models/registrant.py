from datetime import datetime
from .database import db


class Registrant(db.Model):
    """A person enrolled in at least one workshop, identified by email."""

    __tablename__ = 'registrants'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(254), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    enrollments = db.relationship('Enrollment', backref='registrant', lazy='dynamic')

    def __repr__(self):
        return f'<Registrant {self.email}>'
