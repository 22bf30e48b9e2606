import os
import dotenv
dotenv.load_dotenv()
basedir = os.path.abspath(os.path.dirname(__file__))


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# Database configuration
SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(basedir, 'workshops.db')
SQLALCHEMY_TRACK_MODIFICATIONS = False

# Seconds a SQLite writer waits for the database lock before giving up
SQLITE_BUSY_TIMEOUT = float(os.environ.get('SQLITE_BUSY_TIMEOUT', 15))

# Enrollment policy: one enrollment per registrant system-wide, or one per workshop
SINGLE_ENROLLMENT_PER_REGISTRANT = _env_flag('SINGLE_ENROLLMENT_PER_REGISTRANT')

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
