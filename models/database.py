from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event

db = SQLAlchemy()

# Execution option marking a connection that will only read
READ_ONLY_OPTION = 'workshops_read_only'


def init_app(app):
    """Bind the store to the app and apply backend-specific connection setup."""
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite'):
        options = app.config.setdefault('SQLALCHEMY_ENGINE_OPTIONS', {})
        connect_args = options.setdefault('connect_args', {})
        connect_args.setdefault('timeout', app.config.get('SQLITE_BUSY_TIMEOUT', 15))
        connect_args.setdefault('check_same_thread', False)

    db.init_app(app)

    # Import models to register them with SQLAlchemy
    from .registrant import Registrant
    from .workshop import Workshop
    from .enrollment import Enrollment

    with app.app_context():
        if db.engine.dialect.name == 'sqlite':
            _configure_sqlite(db.engine)


def _configure_sqlite(engine):
    # pysqlite defers BEGIN until the first write, which lets two transactions
    # read the same seat counter before either holds the write lock.
    @event.listens_for(engine, 'connect')
    def on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()

    # Read-only units take a deferred lock and can read while a write is open
    @event.listens_for(engine, 'begin')
    def on_begin(conn):
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql('BEGIN')
        else:
            conn.exec_driver_sql('BEGIN IMMEDIATE')
