import os
from dotenv import load_dotenv

load_dotenv()  # Load from .env file

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./daily_forge.db")

# Token decoding (issuance lives outside this service)
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")

# Scripture provider (API.Bible)
SCRIPTURE_API_URL = os.getenv("SCRIPTURE_API_URL", "https://api.scripture.api.bible/v1")
SCRIPTURE_API_KEY = os.getenv("SCRIPTURE_API_KEY")
DEFAULT_BIBLE_ID = os.getenv("DEFAULT_BIBLE_ID", "de4e12af7f28f599-02")  # ESV
SCRIPTURE_TIMEOUT_SECONDS = float(os.getenv("SCRIPTURE_TIMEOUT_SECONDS", "10"))

# Entry writes
AUTOSAVE_DEBOUNCE_SECONDS = float(os.getenv("AUTOSAVE_DEBOUNCE_SECONDS", "0.1"))
COMPLETION_MIN_SECTIONS = int(os.getenv("COMPLETION_MIN_SECTIONS", "2"))
ENTRIES_LIST_LIMIT = int(os.getenv("ENTRIES_LIST_LIMIT", "0"))  # GET /entries only; 0 = no limit

# App
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
