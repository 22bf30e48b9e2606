from flask import Blueprint, jsonify, request
from services import get_enrollment_service, InvalidInput

enrollment_bp = Blueprint('enrollment', __name__)


def get_json_body():
    """Parsed JSON body, or InvalidInput when it is missing or malformed."""
    data = request.get_json(silent=True)
    if data is None:
        raise InvalidInput('Corpo da requisição deve ser JSON')
    return data


def require_fields(data, fields):
    if not isinstance(data, dict):
        raise InvalidInput('Corpo da requisição deve ser um objeto JSON')
    for field in fields:
        if data.get(field) in (None, ''):
            raise InvalidInput(f'{field} é obrigatório')


@enrollment_bp.route('/inscrever', methods=['POST'])
def enroll():
    """Enroll a person into a workshop shift."""
    data = get_json_body()
    require_fields(data, ['email', 'nome', 'oficina_id', 'turno'])

    get_enrollment_service().enroll(
        email=data['email'],
        name=data['nome'],
        workshop_id=data['oficina_id'],
        shift=data['turno']
    )
    return jsonify({'sucesso': True})


@enrollment_bp.route('/editar-inscricao', methods=['POST'])
def transfer():
    """Move a registrant's enrollment to another workshop or shift."""
    data = get_json_body()
    require_fields(data, ['email', 'nova_oficina_id', 'novo_turno'])

    get_enrollment_service().transfer(
        email=data['email'],
        new_workshop_id=data['nova_oficina_id'],
        new_shift=data['novo_turno'],
        from_workshop_id=data.get('oficina_atual_id')
    )
    return jsonify({'sucesso': True, 'mensagem': 'Inscrição atualizada com sucesso'})


@enrollment_bp.route('/inscricoes', methods=['GET'])
def list_enrollments():
    """List enrollments with readable shift times."""
    enrollments = get_enrollment_service().list_enrollments()
    return jsonify([
        {
            'nome': e.registrant_name,
            'email': e.registrant_email,
            'oficina': e.workshop_name,
            'local': e.location,
            'horario': e.shift_label
        }
        for e in enrollments
    ])
