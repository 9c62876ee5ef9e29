from pydantic import BaseModel
import os
from dotenv import load_dotenv

load_dotenv()


def _csv(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseModel):
    port: int = int(os.getenv("PORT", "8080"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    mongo_uri: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db: str = os.getenv("MONGO_DB", "poc")
    products_collection: str = os.getenv("PRODUCTS_COLLECTION", "products")

    query_timeout_seconds: float = float(os.getenv("QUERY_TIMEOUT_SECONDS", "10"))
    default_page: int = int(os.getenv("DEFAULT_PAGE", "1"))
    default_limit: int = int(os.getenv("DEFAULT_LIMIT", "10"))

    cors_origins: list[str] = _csv(os.getenv("CORS_ORIGINS", "*"))


settings = Settings()
