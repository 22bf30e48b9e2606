import logging

import click
from flask import Flask

import models
import services
from models import db
from routes import enrollment_bp, workshops_bp, register_error_handlers


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object('config')
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Initialize database
    models.database.init_app(app)
    services.init_app(app, db)

    # Register blueprints
    app.register_blueprint(workshops_bp)
    app.register_blueprint(enrollment_bp)
    register_error_handlers(app)

    register_commands(app)

    # Create tables
    with app.app_context():
        db.create_all()

    @app.after_request
    def add_header(response):
        """Add headers to prevent caching."""
        response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        response.headers['Pragma'] = 'no-cache'
        response.headers['Expires'] = '0'
        return response

    return app


def register_commands(app):
    @app.cli.command('seed-workshops')
    def seed_workshops_command():
        """Insert the default workshop list."""
        from data.seed_data import seed_database
        created = seed_database()
        click.echo(f'Inserted {len(created)} workshops.')

    @app.cli.command('fresh')
    def fresh_command():
        """Delete all enrollments, registrants and workshops."""
        counts = services.get_enrollment_service().reset()
        click.echo(f'Deleted {counts}.')

    @app.cli.command('check-ledger')
    def check_ledger_command():
        """Verify remaining seats against enrollments for every workshop."""
        violations = services.get_enrollment_service().audit()
        if not violations:
            click.echo('Seat ledger is consistent.')
            return
        for v in violations:
            click.echo(
                f'workshop {v.workshop_id} {v.shift}: {v.reason} '
                f'(remaining={v.remaining}, capacity={v.capacity}, enrolled={v.enrolled})',
                err=True
            )
        raise SystemExit(1)


if __name__ == '__main__':
    create_app().run(debug=True, port=4000, threaded=True)
