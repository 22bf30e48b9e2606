"""Failure kinds reported by the enrollment core.

Every error carries a stable ``kind`` and the HTTP status the adapter maps it
to. Messages are safe to show to callers; storage details stay in the logs.
"""


class EnrollmentError(Exception):
    kind = 'error'
    status_code = 400
    default_message = 'Requisição inválida'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


class InvalidInput(EnrollmentError):
    kind = 'invalid_input'
    default_message = 'Dados inválidos'


class InvalidShift(InvalidInput):
    kind = 'invalid_shift'
    default_message = 'Turno inválido'


class NotFound(EnrollmentError):
    kind = 'not_found'
    status_code = 404
    default_message = 'Registro não encontrado'


class AlreadyEnrolled(EnrollmentError):
    kind = 'already_enrolled'
    default_message = 'Usuário já inscrito nessa oficina'


class CapacityExceeded(EnrollmentError):
    kind = 'capacity_exceeded'
    default_message = 'Limite de vagas atingido nesse turno'


class StorageError(EnrollmentError):
    kind = 'storage_error'
    status_code = 500
    default_message = 'Erro ao acessar o banco de dados'


class ConsistencyError(StorageError):
    default_message = 'Operação cancelada: estado de vagas inconsistente'
