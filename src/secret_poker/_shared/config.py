# Area: Shared
"""
secret_poker._shared.config — Settings and contract descriptor
==============================================================

Settings come from an optional JSON file, overridden by environment
variables (a ``.env`` file in the working directory is loaded first).

The contract descriptor is the JSON record written at deploy time:

    {"contractAddress": "secret1...", "contractCodeHash": "d896..."}

It is loaded once at startup. A missing or incomplete descriptor is a
ConfigurationError, never a silent default.
"""

from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..enums import BroadcastMode
from ..errors import ConfigurationError
from ..models import ContractRef

logger = logging.getLogger("secret_poker.config")

DEFAULT_CONTRACT_INFO_PATH = "contractInfo.json"

# Environment variable -> settings key
ENV_MAPPINGS = {
    "SECRET_CHAIN_ID": "chain_id",
    "SECRET_FEE_DENOM": "fee_denom",
    "SECRET_GAS_PRICE": "gas_price",
    "SECRET_DEFAULT_GAS_LIMIT": "default_gas_limit",
    "SECRET_BROADCAST_MODE": "broadcast_mode",
    "CONTRACT_INFO_PATH": "contract_info_path",
}


class ClientSettings(BaseModel):
    """Validated client configuration."""
    model_config = ConfigDict(frozen=True)

    chain_id: str = Field(default="pulsar-3", min_length=1)
    fee_denom: str = Field(default="uscrt", min_length=1)
    gas_price: float = Field(default=0.1, ge=0)
    default_gas_limit: int = Field(default=50_000, gt=0)
    broadcast_mode: BroadcastMode = BroadcastMode.BLOCK
    contract_info_path: str = DEFAULT_CONTRACT_INFO_PATH


def load_settings(config_path: Optional[str] = None) -> ClientSettings:
    """
    Load settings from ``config_path`` and the environment.

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid
    """
    load_dotenv()
    config: Dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}", path=str(path))
        try:
            with open(path, encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Config file is not valid JSON: {e}", path=str(path)) from e

    for env_key, config_key in ENV_MAPPINGS.items():
        if env_key in os.environ:
            config[config_key] = os.environ[env_key]

    try:
        return ClientSettings.model_validate(config)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid settings: {e.error_count()} error(s): "
            + "; ".join(f"{err['loc'][0]}: {err['msg']}" for err in e.errors()),
            path=config_path,
        ) from e


def load_contract_ref(path: str = DEFAULT_CONTRACT_INFO_PATH) -> ContractRef:
    """
    Load the deployed contract's address and code hash.

    Raises:
        ConfigurationError: If the file is missing, unreadable, or incomplete
    """
    info_path = Path(path)
    if not info_path.exists():
        raise ConfigurationError(f"Contract info file not found: {info_path}", path=str(info_path))
    try:
        with open(info_path, encoding="utf-8") as f:
            info = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Contract info file is not valid JSON: {e}", path=str(info_path)
        ) from e

    if not isinstance(info, dict):
        raise ConfigurationError("Contract info must be a JSON object", path=str(info_path))
    missing = [k for k in ("contractAddress", "contractCodeHash") if not info.get(k)]
    if missing:
        raise ConfigurationError(
            f"Contract info is missing {missing}", path=str(info_path)
        )

    try:
        contract = ContractRef(address=info["contractAddress"], code_hash=info["contractCodeHash"])
    except ValidationError as e:
        raise ConfigurationError(
            f"Contract info has invalid values: {e.error_count()} error(s)", path=str(info_path)
        ) from e
    logger.info(f"Contract info loaded: {contract.address}")
    return contract
