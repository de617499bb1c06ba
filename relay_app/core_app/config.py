import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def get_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    db_host = os.getenv("DB_HOST", "postgres")
    db_port = os.getenv("DB_PORT", "5432")
    db_name = os.getenv("DB_NAME", "mydatabase")
    db_user = os.getenv("DB_USER", "myuser")
    db_pass = os.getenv("DB_PASSWORD", "secret")

    return f"postgresql+psycopg2://{db_user}:{db_pass}@{db_host}:{db_port}/{db_name}"


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


class Settings(BaseModel):
    database_url: str
    stream_api_key: Optional[str] = None
    stream_api_secret: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4"
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment and an optional .env file."""
        load_dotenv()

        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            database_url=get_database_url(),
            stream_api_key=os.getenv("STREAM_API_KEY"),
            stream_api_secret=_first_env("STREAM_PRIVATE_KEY", "STREAM_API_SECRET"),
            openai_api_key=_first_env("OPEN_AI_KEY", "OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 5000)),
            cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
        )
