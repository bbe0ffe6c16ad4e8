import os

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
JWT_ALGORITHM = "HS256"
TOKEN_TTL_HOURS = 24

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "employee_management_test"),
}

FRONTEND_URL = "http://localhost:5173"
PORT = 5000

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
