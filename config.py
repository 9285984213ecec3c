import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./database.sqlite"
DEFAULT_MAIL_PORT = 587


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    sql_echo: bool = False

    mail_host: Optional[str] = None
    mail_port: int = DEFAULT_MAIL_PORT
    mail_user: Optional[str] = None
    mail_password: Optional[str] = None
    mail_from: Optional[str] = None
    mail_timeout: float = 30.0

    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        mail_port = os.environ.get("MAIL_PORT")
        mail_user = os.environ.get("MAIL_USER") or None
        return cls(
            database_url=os.environ.get("DATABASE_URL") or DEFAULT_DATABASE_URL,
            sql_echo=os.environ.get("SQL_ECHO", "false").lower() == "true",
            mail_host=os.environ.get("MAIL_HOST") or None,
            mail_port=int(mail_port) if mail_port else DEFAULT_MAIL_PORT,
            mail_user=mail_user,
            mail_password=os.environ.get("MAIL_PASS") or None,
            # Sender falls back to the SMTP login
            mail_from=os.environ.get("MAIL_FROM") or mail_user,
            mail_timeout=float(os.environ.get("MAIL_TIMEOUT", "30")),
            cors_origins=_split_origins(os.environ.get("CORS_ORIGINS", "*")),
            port=int(os.environ.get("PORT", "3000")),
        )
