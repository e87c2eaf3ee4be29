"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin ensuciar la CLI ni
  la capa HTTP.
- Permite que los adaptadores (registradores, IA) lean la config de forma
  consistente.
"""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (multiplataforma, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "domain-scout"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "domain-scout"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "domain-scout"
    return Path.home() / ".config" / "domain-scout"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe o actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# domain-scout user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


def _credential(name: str) -> AliasChoices:
    # Acepta el nombre del campo (kwargs), la variable con prefijo y la que
    # documenta el registrador, p. ej. PORKBUN_API_KEY.
    return AliasChoices(name, f"DOMAIN_SCOUT_{name.upper()}", name.upper())


class AppSettings(BaseSettings):
    """Settings centrales de la aplicación."""

    model_config = SettingsConfigDict(
        env_prefix="DOMAIN_SCOUT_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Orden: primero el proyecto (dev), luego la config global del usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout per registrar/RDAP request (seconds).",
    )
    user_agent: str = Field(
        default="domain-scout/0.1 (+https://local)",
        min_length=1,
    )

    # Aggregation / bulk
    cache_ttl_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Default lifetime of a cached registrar quote.",
    )
    bulk_chunk_size: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Domains priced concurrently per bulk chunk.",
    )
    bulk_max_domains: int = Field(
        default=500,
        ge=1,
        le=5000,
        description="Hard cap on the domain set of one bulk request.",
    )
    default_currency: str = Field(default="USD", min_length=3, max_length=8)
    rdap_base_url: str = Field(default="https://rdap.org", min_length=8)
    rdap_cache_ttl_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Lifetime of a memoized RDAP registration lookup.",
    )

    # Registrar credentials
    namecheap_api_key: str | None = Field(default=None, validation_alias=_credential("namecheap_api_key"))
    namecheap_api_user: str | None = Field(default=None, validation_alias=_credential("namecheap_api_user"))
    godaddy_api_key: str | None = Field(default=None, validation_alias=_credential("godaddy_api_key"))
    godaddy_api_secret: str | None = Field(default=None, validation_alias=_credential("godaddy_api_secret"))
    porkbun_api_key: str | None = Field(default=None, validation_alias=_credential("porkbun_api_key"))
    porkbun_secret_key: str | None = Field(default=None, validation_alias=_credential("porkbun_secret_key"))
    cloudflare_api_token: str | None = Field(default=None, validation_alias=_credential("cloudflare_api_token"))
    upflare_api_key: str | None = Field(default=None, validation_alias=_credential("upflare_api_key"))

    porkbun_base_url: str = Field(default="https://api.porkbun.com/api/json/v3", min_length=8)
    porkbun_pricing_ttl_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="Lifetime of the downloaded Porkbun price table.",
    )

    # Suggestion service (OpenAI compatible)
    ai_api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI-compatible suggestion provider.",
    )
    ai_base_url: str = Field(default="https://api.openai.com/v1", min_length=8)
    ai_model: str = Field(default="gpt-4o-mini", min_length=1)
    ai_temperature: float = Field(default=0.4, ge=0.0, le=2.0)
    ai_timeout_seconds: float = Field(default=30.0, gt=0)
    ai_max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Max retries on transient failures (rate limit, network, bad JSON).",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Instancia cacheada para no re-parsear el entorno."""
    return AppSettings()
