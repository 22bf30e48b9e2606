from flask import Blueprint, jsonify
from services import get_enrollment_service, InvalidInput
from .enrollment import get_json_body

workshops_bp = Blueprint('workshops', __name__)


def workshop_to_json(workshop):
    return {
        'id': workshop.id,
        'nome': workshop.name,
        'local': workshop.location,
        'limite_turno1': workshop.seats_shift1,
        'limite_turno2': workshop.seats_shift2,
        'capacidade_turno1': workshop.capacity_shift1,
        'capacidade_turno2': workshop.capacity_shift2
    }


@workshops_bp.route('/seed', methods=['POST'])
def seed():
    """Insert the posted workshops. Not idempotent."""
    data = get_json_body()
    if not isinstance(data, list):
        raise InvalidInput('Esperada uma lista de oficinas')

    specs = []
    for item in data:
        if not isinstance(item, dict):
            specs.append(item)  # rejected by the service with its position
            continue
        specs.append({
            'name': item.get('nome'),
            'location': item.get('local'),
            'seats_shift1': item.get('limite_turno1'),
            'seats_shift2': item.get('limite_turno2')
        })

    get_enrollment_service().seed(specs)
    return 'Oficinas inseridas com sucesso'


@workshops_bp.route('/oficinas', methods=['GET'])
def list_workshops():
    """List every workshop with its remaining seats per shift."""
    workshops = get_enrollment_service().list_workshops()
    return jsonify([workshop_to_json(w) for w in workshops])


@workshops_bp.route('/fresh', methods=['POST'])
def fresh():
    """Delete all enrollments, registrants and workshops."""
    get_enrollment_service().reset()
    return jsonify({'sucesso': True, 'mensagem': 'Todas as tabelas foram limpas com sucesso'})
