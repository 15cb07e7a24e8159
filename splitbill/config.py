import os
from dotenv import load_dotenv

load_dotenv()


def _split_origins(value: str):
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Config:
    # Secret key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")

    # CORS (comma separated list, "*" allows any origin)
    CORS_ORIGINS = _split_origins(os.environ.get("CORS_ORIGINS", "*"))

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")

    # Display only, never used in arithmetic
    CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "$")

config = Config()
