import os

from config.base import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET = os.getenv("JWT_SECRET", "please-set-JWT_SECRET")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
