from config.base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret-test-jwt-secret-test-jwt-secret-test-jwt-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
BINLOG_ENABLED = False
FACE_RECOGNITION_ENABLED = False
