# app/config.py
# Role: Runtime configuration for the business manager.
#       Loads a .env file, reads environment variables, and exposes
#       the supported currencies and the active currency selection.

"""
Application settings.

Everything configurable lives on `Settings`. Routes receive it through the
`get_settings` dependency, so the active currency is an explicit value that
is passed to the formatting helpers rather than a global read at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    locale: str
    name: str


CURRENCIES: Dict[str, Currency] = {
    "USD": Currency("USD", "$", "en-US", "US Dollar"),
    "LKR": Currency("LKR", "Rs.", "en-LK", "Sri Lankan Rupee"),
    "EUR": Currency("EUR", "€", "de-DE", "Euro"),
    "GBP": Currency("GBP", "£", "en-GB", "British Pound"),
    "INR": Currency("INR", "₹", "en-IN", "Indian Rupee"),
    "JPY": Currency("JPY", "¥", "ja-JP", "Japanese Yen"),
    "AUD": Currency("AUD", "A$", "en-AU", "Australian Dollar"),
    "CAD": Currency("CAD", "C$", "en-CA", "Canadian Dollar"),
}

DEFAULT_CURRENCY = "USD"


def _env_truthy(name: str, default: str = "0") -> bool:
    v = os.getenv(name, default)
    return str(v).strip().lower() in ("1", "true", "yes", "y", "on")


def resolve_currency(code: str | None) -> Currency:
    """
    Look up a currency by code (case-insensitive).
    Unknown or empty codes fall back to USD.
    """
    key = (code or "").strip().upper()
    return CURRENCIES.get(key, CURRENCIES[DEFAULT_CURRENCY])


@dataclass
class Settings:
    database_url: str = ""
    currency_code: str = DEFAULT_CURRENCY
    client_url: str = "http://localhost:3000"
    log_level: str = "INFO"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=list)

    @property
    def currency(self) -> Currency:
        return resolve_currency(self.currency_code)

    @classmethod
    def from_env(cls) -> "Settings":
        client_url = os.getenv("CLIENT_URL", "http://localhost:3000")
        return cls(
            database_url=os.getenv("DATABASE_URL", "").strip(),
            currency_code=os.getenv("CURRENCY", DEFAULT_CURRENCY),
            client_url=client_url,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            debug=_env_truthy("DEBUG", "0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            cors_origins=[o.strip() for o in client_url.split(",") if o.strip()],
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
