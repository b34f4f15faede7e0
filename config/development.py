import os

from config.base import *  # noqa: F401,F403

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Development applies schema.sql on startup unless told otherwise
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
