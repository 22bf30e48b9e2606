"""Default workshop list used by ``flask seed-workshops``."""

from services import get_enrollment_service


WORKSHOPS = [
    {'name': 'Robótica com Arduino', 'location': 'Laboratório 1', 'seats_shift1': 20, 'seats_shift2': 20},
    {'name': 'Introdução à Programação', 'location': 'Laboratório 2', 'seats_shift1': 25, 'seats_shift2': 25},
    {'name': 'Fotografia com Celular', 'location': 'Sala 101', 'seats_shift1': 15, 'seats_shift2': 15},
    {'name': 'Oratória', 'location': 'Auditório', 'seats_shift1': 40, 'seats_shift2': 40},
    {'name': 'Primeiros Socorros', 'location': 'Sala 102', 'seats_shift1': 30, 'seats_shift2': 0},
    {'name': 'Educação Financeira', 'location': 'Sala 103', 'seats_shift1': 0, 'seats_shift2': 30},
]


def seed_database(workshops=None):
    """Populate the database with the default workshops."""
    return get_enrollment_service().seed(list(workshops or WORKSHOPS))
