"""
Configuration loader for Account Data Forms.

Handles loading configuration from JSON/YAML files and converting
to typed dataclass models.
"""

from __future__ import annotations

import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from .models import ADFConfig, NetworkConfig, RelayConfig


def load_raw_config(path: Path) -> Dict[str, Any]:
    """
    Load raw configuration from JSON or YAML file.

    Also loads environment variables from .env file if present.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Dictionary with raw configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is unsupported
        json.JSONDecodeError: If JSON is invalid
        yaml.YAMLError: If YAML is invalid
    """
    load_dotenv()

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    content = path.read_text(encoding="utf-8")

    if suffix in {".yaml", ".yml"}:
        config = yaml.safe_load(content) or {}
    elif suffix == ".json":
        config = json.loads(content) if content.strip() else {}
    else:
        raise ValueError(
            f"Unsupported config format: {suffix}. "
            f"Use .json, .yaml, or .yml"
        )

    if not isinstance(config, dict):
        raise ValueError(f"Config root must be a mapping, got {type(config).__name__}")
    return config


def build_network_config(raw: Dict[str, Any]) -> NetworkConfig:
    """
    Build NetworkConfig from the ``network`` section.
    """
    network_raw = raw.get("network") or {}
    return NetworkConfig(
        network_type=network_raw.get("network_type"),
        horizon_url=network_raw.get("horizon_url"),
        network_passphrase=network_raw.get("network_passphrase"),
        base_fee=int(network_raw.get("base_fee", NetworkConfig.base_fee)),
        timeout_seconds=int(network_raw.get("timeout_seconds", NetworkConfig.timeout_seconds)),
        request_timeout=float(network_raw.get("request_timeout", NetworkConfig.request_timeout)),
    )


def build_relay_config(raw: Dict[str, Any]) -> RelayConfig:
    """
    Build RelayConfig from the ``relay`` section.
    """
    relay_raw = raw.get("relay") or {}
    return RelayConfig(
        endpoint=relay_raw.get("endpoint", RelayConfig.endpoint),
        timeout=float(relay_raw.get("timeout", RelayConfig.timeout)),
        return_url=relay_raw.get("return_url"),
        message=relay_raw.get("message", RelayConfig.message),
    )


def build_config_from_raw(raw: Dict[str, Any], path: Optional[Path | str] = None) -> ADFConfig:
    """
    Build and validate ADFConfig from raw configuration data.
    """
    if isinstance(path, str):
        path = Path(path)
    if path is not None:
        path = path.expanduser().resolve()

    config = ADFConfig(
        network=build_network_config(raw),
        relay=build_relay_config(raw),
        config_path=path,
    )
    config.validate()
    return config


def load_config_from_file(path: Path | str) -> ADFConfig:
    """
    Load and validate configuration from file.

    This is the main entry point for loading configuration.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Validated ADFConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If configuration is invalid

    Example:
        >>> config = load_config_from_file("config.yaml")
        >>> print(config.network.horizon_url)
        https://horizon-testnet.stellar.org
    """
    if isinstance(path, str):
        path = Path(path)

    path = path.expanduser().resolve()

    raw = load_raw_config(path)
    return build_config_from_raw(raw, path)


def config_to_raw(config: ADFConfig) -> Dict[str, Any]:
    """
    Serialize ADFConfig into a JSON/YAML-friendly dict.
    """
    return {
        "network": {
            "network_type": config.network.network_type,
            "horizon_url": config.network.horizon_url,
            "network_passphrase": config.network.network_passphrase,
            "base_fee": config.network.base_fee,
            "timeout_seconds": config.network.timeout_seconds,
            "request_timeout": config.network.request_timeout,
        },
        "relay": {
            "endpoint": config.relay.endpoint,
            "timeout": config.relay.timeout,
            "return_url": config.relay.return_url,
            "message": config.relay.message,
        },
    }


def save_config_to_file(config: ADFConfig, path: Path | str) -> None:
    """
    Serialize and save configuration to a JSON/YAML file.
    """
    if isinstance(path, str):
        path = Path(path)

    raw = config_to_raw(config)
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        content = yaml.safe_dump(raw, sort_keys=False)
    elif suffix == ".json":
        content = json.dumps(raw, indent=2)
    else:
        raise ValueError(f"Unsupported config format: {suffix}. Use .json, .yaml, or .yml")

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
