import os

SECRET_KEY = "test-secret-key"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ministry_test_db"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-test"
TEACHER_PASSWORD = "teacher-test"

GEMINI_API_KEY = ""
GEMINI_MODEL = "gemini-2.5-flash"

LOG_LEVEL = "WARNING"
