import os
from datetime import timedelta
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# DEV defaults; override through the environment in production.
SECRET_KEY = os.getenv("GRADEBOARD_SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("GRADEBOARD_JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE = timedelta(
    minutes=int(os.getenv("GRADEBOARD_TOKEN_EXPIRE_MINUTES", "60"))
)

DATABASE_URL = os.getenv("GRADEBOARD_DATABASE_URL", f"sqlite:///{BASE_DIR}/gradeboard.db")
LOG_LEVEL = os.getenv("GRADEBOARD_LOG_LEVEL", "INFO")

# Grading policy
LEADERBOARD_SIZE = int(os.getenv("GRADEBOARD_LEADERBOARD_SIZE", "10"))
MAX_POSSIBLE_POINTS = 1000
STAFF_ROLES = ("admin", "lecturer")
