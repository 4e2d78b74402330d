from pydantic import BaseModel
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseModel):
    port: int = int(os.getenv("PORT", "3001"))

    mongo_uri: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db: str = os.getenv("MONGO_DB", "docsearch")
    mongo_timeout_ms: int = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))

    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:5173")

    default_limit: int = int(os.getenv("DEFAULT_LIMIT", "10"))


settings = Settings()
