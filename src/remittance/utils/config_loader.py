"""
Configuration loader for the remittance rail
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError
import logging

from remittance.integrations.contracts.interfaces import Credentials

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "remittance.yml"


class EndpointsConfig(BaseModel):
    """Fixed endpoint paths on the rail"""

    token: str = "/auth/realms/cdp/protocol/openid-connect/token"
    quote: str = "/amr/ras/api/v1_0/ras/quote"
    create_transaction: str = "/amr/ras/api/v1_0/ras/createtransaction"
    confirm_transaction: str = "/amr/ras/api/v1_0/ras/confirmtransaction"
    enquire_transaction: str = "/amr/ras/api/v1_0/ras/enquire-transaction"
    rates: str = "/raas/masters/v1/rates"
    codes: str = "/raas/masters/v1/codes"
    service_corridor: str = "/raas/masters/v1/service-corridor"
    # Branches live under {banks}/{bank_id}/branches
    banks: str = "/raas/masters/v1/banks"


class PartnerHeadersConfig(BaseModel):
    """Partner routing headers sent on every JSON call"""

    sender: Optional[str] = None
    channel: Optional[str] = None
    company: Optional[str] = None
    branch: Optional[str] = None

    def as_headers(self) -> Dict[str, str]:
        return {key: value for key, value in self.model_dump().items() if value}


class RemittanceConfig(BaseModel):
    """Complete rail configuration"""

    base_url: str = "https://drap-sandbox.digitnine.com"
    timeout_seconds: float = Field(default=20.0, gt=0)
    retry_attempts: int = Field(default=1, ge=1, le=10)
    retry_backoff_seconds: float = Field(default=0.5, ge=0.0)
    integrations_mode: str = "mock"
    endpoints: EndpointsConfig = Field(default_factory=EndpointsConfig)
    partner_headers: PartnerHeadersConfig = Field(default_factory=PartnerHeadersConfig)

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    @property
    def use_real_rail(self) -> bool:
        return self.integrations_mode.strip().lower() in {"real", "live"}


_ENV_OVERRIDES = {
    "DRAP_BASE_URL": "base_url",
    "DRAP_TIMEOUT_SECONDS": "timeout_seconds",
    "DRAP_RETRY_ATTEMPTS": "retry_attempts",
    "INTEGRATIONS_MODE": "integrations_mode",
}

_CREDENTIAL_ENV = {
    "client_id": "DRAP_CLIENT_ID",
    "client_secret": "DRAP_CLIENT_SECRET",
    "username": "DRAP_USERNAME",
    "password": "DRAP_PASSWORD",
}


def load_remittance_config(config_path: Optional[Path] = None) -> RemittanceConfig:
    """
    Load and validate rail configuration from YAML, then apply env overrides

    Args:
        config_path: Path to config file. Defaults to config/remittance.yml;
            a missing default file falls back to built-in defaults.

    Returns:
        Validated RemittanceConfig object

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    config_data: Dict[str, Any] = {}

    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No remittance config at %s, using defaults", path)

    for env_key, field_name in _ENV_OVERRIDES.items():
        value = os.getenv(env_key)
        if value:
            config_data[field_name] = value

    try:
        config = RemittanceConfig(**config_data)
    except ValidationError as e:
        logger.error(f"Remittance config validation failed: {e}")
        raise

    logger.info(
        "Loaded remittance config (base_url=%s, mode=%s, retry_attempts=%d)",
        config.base_url,
        config.integrations_mode,
        config.retry_attempts,
    )
    return config


def load_credentials() -> Credentials:
    """
    Build rail credentials from the environment

    Raises:
        ValueError: Naming (never echoing) any missing variables
    """
    values = {field_name: os.getenv(env_key, "") for field_name, env_key in _CREDENTIAL_ENV.items()}
    missing = [_CREDENTIAL_ENV[name] for name, value in values.items() if not value]
    if missing:
        raise ValueError(f"Missing rail credentials: {', '.join(missing)}")
    return Credentials(**values)
