import os
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


def _csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings:
    # -------------------------------------------------------
    # Project
    # -------------------------------------------------------
    PROJECT_NAME: str = "Portfolio API"
    ENV: str = os.getenv("ENV", "dev")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # -------------------------------------------------------
    # Database
    # -------------------------------------------------------
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./portfolio.db"
    )

    # Render uses postgres:// but SQLAlchemy needs postgresql://
    if DATABASE_URL.startswith("postgres://"):
        DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

    # -------------------------------------------------------
    # Authentication / JWT
    # -------------------------------------------------------
    SECRET_KEY: str = os.getenv(
        "SECRET_KEY",
        "supersecretlocalkey123"   # Only used for local dev
    )
    ALGORITHM: str = "HS256"

    # 1 day token expiry by default
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)
    )

    # "local" issues our own tokens, "supabase" trusts Supabase Auth tokens
    AUTH_BACKEND: str = os.getenv("AUTH_BACKEND", "local")
    SUPABASE_JWT_SECRET: str = os.getenv("SUPABASE_JWT_SECRET", "")
    ADMIN_EMAILS: list[str] = _csv(os.getenv("ADMIN_EMAILS", ""))

    # Bootstrap admin account, created on startup when both are set
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")

    # -------------------------------------------------------
    # Portfolio item store
    # -------------------------------------------------------
    ITEM_STORE_BACKEND: str = os.getenv("ITEM_STORE_BACKEND", "sql")
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

    # -------------------------------------------------------
    # Contact form relay
    # -------------------------------------------------------
    FORM_RELAY_URL: str = os.getenv(
        "FORM_RELAY_URL",
        "https://api.web3forms.com/submit"
    )
    FORM_RELAY_ACCESS_KEY: str = os.getenv("FORM_RELAY_ACCESS_KEY", "")
    FORM_RELAY_TIMEOUT: float = float(os.getenv("FORM_RELAY_TIMEOUT", 10))

    WHATSAPP_NUMBER: str = os.getenv("WHATSAPP_NUMBER", "")
    WHATSAPP_MESSAGE: str = os.getenv(
        "WHATSAPP_MESSAGE",
        "Hello! I am interested in your photography services."
    )

    # -------------------------------------------------------
    # Media / lightbox
    # -------------------------------------------------------
    THUMBNAIL_SIZE: int = int(os.getenv("THUMBNAIL_SIZE", 800))
    FULL_SCREEN_SIZE: int = int(os.getenv("FULL_SCREEN_SIZE", 4000))
    LIGHTBOX_MAX_SESSIONS: int = int(os.getenv("LIGHTBOX_MAX_SESSIONS", 500))

    # Static fallback images for the category cards
    STATIC_PATH: str = os.getenv("STATIC_PATH", "./static")

    CORS_ORIGINS: list[str] = _csv(os.getenv("CORS_ORIGINS", "*"))


# Single instance that is imported everywhere
settings = Settings()
