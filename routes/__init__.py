from flask import jsonify, current_app
from services import EnrollmentError

from .enrollment import enrollment_bp
from .workshops import workshops_bp

__all__ = ['enrollment_bp', 'workshops_bp', 'register_error_handlers']


def register_error_handlers(app):
    @app.errorhandler(EnrollmentError)
    def handle_enrollment_error(error):
        if error.status_code >= 500:
            current_app.logger.error(f'{error.kind}: {error.message}')
        return jsonify(error.to_dict()), error.status_code
