from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from remitos.errors import ConfigError

ROOT_DIR = Path(__file__).resolve().parents[1]  # .../remitos (repo root)
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int | None = None) -> int | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError as e:
        raise ConfigError(f"{keys[0]} must be an integer, got {v!r}") from e


def _get_path(*keys: str, default: str) -> str:
    v = _get_env(*keys, default=default)
    return str(v)


def _parse_credentials_json(raw: str, source: str) -> dict[str, Any]:
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{source} is not valid JSON: {e}") from e
    if not isinstance(info, dict):
        raise ConfigError(f"{source} must contain a JSON object")
    return info


def _load_credentials() -> dict[str, Any]:
    """
    Resolution order:
    1) full credential document (inline JSON, then file)
    2) GOOGLE_CLIENT_EMAIL + GOOGLE_PRIVATE_KEY
    """
    raw = _get_env("GOOGLE_CREDENTIALS_JSON", "GOOGLE_CREDENTIALS")
    if raw:
        return _parse_credentials_json(raw, "GOOGLE_CREDENTIALS_JSON")

    path = _get_env("GOOGLE_CREDENTIALS_FILE")
    if path is None and (ROOT_DIR / "credentials.json").exists():
        path = str(ROOT_DIR / "credentials.json")
    if path:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"credentials file not found: {p}")
        return _parse_credentials_json(p.read_text(encoding="utf-8"), str(p))

    email = _get_env("GOOGLE_CLIENT_EMAIL")
    key = _get_env("GOOGLE_PRIVATE_KEY")
    if email and key:
        # .env files usually carry the PEM with escaped newlines
        return {
            "type": "service_account",
            "client_email": email,
            "private_key": key.replace("\\n", "\n"),
            "token_uri": "https://oauth2.googleapis.com/token",
        }

    raise ConfigError(
        "Google credentials missing. Set GOOGLE_CREDENTIALS_JSON, GOOGLE_CREDENTIALS_FILE "
        "or GOOGLE_CLIENT_EMAIL + GOOGLE_PRIVATE_KEY in .env"
    )


@dataclass(frozen=True)
class Settings:
    spreadsheet_id: str
    sheet_range: str
    credentials_info: dict[str, Any] = field(repr=False)
    host: str = "0.0.0.0"
    port: int = 3000
    db_path: str = str(ROOT_DIR / "data" / "remitos.db")
    company_name: str = "Distribuidora Malvinas"
    company_cuit: str = "XX-XXXXXXXX-X"
    company_phone: str = "(completar)"
    company_address: str = "Pablo Areguati 2178 - Grand Bourg - Buenos Aires"

    @property
    def company_lines(self) -> list[str]:
        return [
            self.company_name,
            f"CUIT: {self.company_cuit}",
            f"Tel: {self.company_phone}",
            f"Domicilio: {self.company_address}",
        ]


def load_settings() -> Settings:
    spreadsheet_id = _get_env("SPREADSHEET_ID", "GOOGLE_SHEET_ID", default="") or ""
    if not spreadsheet_id:
        raise ConfigError("SPREADSHEET_ID is empty. Set SPREADSHEET_ID in .env")

    return Settings(
        spreadsheet_id=spreadsheet_id,
        sheet_range=_get_env("SHEET_RANGE", "RANGE", default="Hoja1!A:D") or "Hoja1!A:D",
        credentials_info=_load_credentials(),
        host=_get_env("HOST", default="0.0.0.0") or "0.0.0.0",
        port=_get_int("PORT", default=3000) or 3000,
        db_path=_get_path("DB_PATH", "DATABASE_PATH", default=str(ROOT_DIR / "data" / "remitos.db")),
        company_name=_get_env("COMPANY_NAME", default=Settings.company_name) or Settings.company_name,
        company_cuit=_get_env("COMPANY_CUIT", default=Settings.company_cuit) or Settings.company_cuit,
        company_phone=_get_env("COMPANY_PHONE", default=Settings.company_phone) or Settings.company_phone,
        company_address=_get_env("COMPANY_ADDRESS", default=Settings.company_address)
        or Settings.company_address,
    )
