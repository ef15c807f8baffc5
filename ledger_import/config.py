"""Runtime settings read from the environment.

Entrypoints call ``load_dotenv`` first (``.env`` in the working directory,
never overriding variables already set), then :meth:`Settings.from_env`.

Variables
---------
``LEDGER_API_KEY``      personal access token for the ledger API
``LEDGER_API_URL``      API root (default: the public ledger API)
``LEDGER_BUDGET``       budget display name to import into
``LEDGER_ACCOUNT``      account display name to import into
``LEDGER_IMPORT_MODE``  ``checking`` (default) or ``credit_card``
``BANK_BRANCH``, ``BANK_ACCOUNT``, ``BANK_PIN``
                        bank portal login, passed through to the scraper
``ENABLE_SCREENSHOTS``  diagnostic capture flag for the scraper
``DATABASE_URL``        optional; enables the local import history
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, SecretStr, field_validator

from .errors import ConfigError
from .ledger_client import DEFAULT_API_URL
from .models import ImportMode

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    ledger_api_key: SecretStr | None = None
    ledger_api_url: str = DEFAULT_API_URL
    ledger_budget: str | None = None
    ledger_account: str | None = None
    import_mode: ImportMode = ImportMode.CHECKING
    bank_branch: str | None = None
    bank_account: str | None = None
    bank_pin: SecretStr | None = None
    enable_screenshots: bool = False
    database_url: str | None = None

    @field_validator("enable_screenshots", mode="before")
    @classmethod
    def _parse_flag(cls, v: object) -> object:
        if isinstance(v, str):
            s = v.strip().lower()
            if s in _TRUE:
                return True
            if s in _FALSE:
                return False
        return v

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            val = env.get(name)
            return val if val and val.strip() else None

        values: dict[str, object] = {
            "ledger_api_key": get("LEDGER_API_KEY"),
            "ledger_budget": get("LEDGER_BUDGET"),
            "ledger_account": get("LEDGER_ACCOUNT"),
            "bank_branch": get("BANK_BRANCH"),
            "bank_account": get("BANK_ACCOUNT"),
            "bank_pin": get("BANK_PIN"),
            "enable_screenshots": env.get("ENABLE_SCREENSHOTS", ""),
            "database_url": get("DATABASE_URL"),
        }
        if get("LEDGER_API_URL"):
            values["ledger_api_url"] = get("LEDGER_API_URL")
        if get("LEDGER_IMPORT_MODE"):
            values["import_mode"] = get("LEDGER_IMPORT_MODE")
        try:
            return cls.model_validate(values)
        except ValueError as e:
            raise ConfigError(f"invalid settings: {e}") from e

    def require(self, *names: str) -> None:
        """Raise :class:`ConfigError` naming every unset field in ``names``."""

        missing = [n for n in names if getattr(self, n) is None]
        if missing:
            env_names = ", ".join(n.upper() for n in missing)
            raise ConfigError(f"missing required settings: {env_names}")


__all__ = ["Settings"]
