import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./internship_portal.db")
BASE_DIR = os.path.dirname(__file__)

# JWT Settings
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_ACCESS_TOKEN_EXPIRE_MINUTES = int(
    os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60))
)  # 7 days

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Mentor reply windows (hours) per SLA mode
SLA_LIGHT_REPLY_HOURS = int(os.getenv("SLA_LIGHT_REPLY_HOURS", "48"))
SLA_STANDARD_REPLY_HOURS = int(os.getenv("SLA_STANDARD_REPLY_HOURS", "24"))
