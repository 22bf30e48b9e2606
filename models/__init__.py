from .database import db
from .registrant import Registrant
from .workshop import Workshop
from .enrollment import Enrollment, SHIFT1, SHIFT2, SHIFTS

__all__ = ['db', 'Registrant', 'Workshop', 'Enrollment', 'SHIFT1', 'SHIFT2', 'SHIFTS']
