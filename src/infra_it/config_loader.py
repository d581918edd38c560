"""
Configuration loading utilities.

This module loads the integration-test configuration (fixture root,
terragrunt binary, input variables, Azure tenant/subscription and the
expected resource values) from it_config.json.

Lookup Order:
    1. Explicit path argument
    2. INFRA_IT_CONFIG environment variable
    3. Caller-supplied default path (e.g. next to a conftest)
    4. it_config.json in the current directory

Environment variables AZURE_TENANT_ID, AZURE_SUBSCRIPTION_ID,
AZURE_CLIENT_ID, AZURE_CLIENT_SECRET and TERRAGRUNT_BINARY override the
matching values from the file.

Usage:
    from infra_it.config_loader import load_it_config

    config = load_it_config(Path("tests/e2e/it_config.json"))
    print(config.expected.resource_group_name)  # "rg-edo-dev-testapp"
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from . import constants as CONSTANTS
from .context import AzureSettings, ExpectedInfrastructure, ItConfig
from .exceptions import ConfigurationError


def _load_json_file(file_path: Path) -> Dict[str, Any]:
    """
    Load a JSON file and return its contents as a dictionary.

    Raises:
        ConfigurationError: If the file is missing, has invalid JSON or is
                            not a JSON object
    """
    if not file_path.exists():
        raise ConfigurationError(
            "Configuration file not found",
            config_file=str(file_path)
        )

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            content = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in configuration file: {e}",
            config_file=str(file_path)
        )

    if not isinstance(content, dict):
        raise ConfigurationError(
            "Configuration root must be a JSON object",
            config_file=str(file_path)
        )
    return content


def resolve_config_path(
    config_path: Optional[Path] = None,
    default_path: Optional[Path] = None
) -> Path:
    """Pick the configuration file following the lookup order above."""
    if config_path is not None:
        return Path(config_path)
    env_path = os.environ.get(CONSTANTS.IT_CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    if default_path is not None:
        return Path(default_path)
    return Path.cwd() / CONSTANTS.IT_CONFIG_FILE


def _parse_expected(raw: Any, config_file: str) -> ExpectedInfrastructure:
    if not isinstance(raw, dict):
        raise ConfigurationError("'expected' must be an object", config_file=config_file)

    for key in CONSTANTS.REQUIRED_EXPECTED_KEYS:
        if key not in raw:
            raise ConfigurationError(
                f"Missing required field 'expected.{key}'",
                config_file=config_file
            )

    subnets = raw["subnets"]
    if not isinstance(subnets, dict) or not all(isinstance(v, str) for v in subnets.values()):
        raise ConfigurationError(
            "'expected.subnets' must map subnet names to address prefixes",
            config_file=config_file
        )

    return ExpectedInfrastructure(
        resource_group_name=raw["resource_group_name"],
        vnet_name=raw["vnet_name"],
        vnet_address_space=raw["vnet_address_space"],
        subnets=dict(subnets),
        important_ip_address=raw.get("important_ip_address"),
    )


def _parse_azure(raw: Any, config_file: str) -> AzureSettings:
    if not isinstance(raw, dict):
        raise ConfigurationError("'azure' must be an object", config_file=config_file)

    settings = AzureSettings(
        tenant=raw.get("tenant", ""),
        subscription=raw.get("subscription", ""),
        client_id=raw.get("client_id", ""),
        client_secret=raw.get("client_secret", ""),
    )

    for attr, env_var in CONSTANTS.AZURE_ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            setattr(settings, attr, value)

    return settings


def load_it_config(
    config_path: Optional[Path] = None,
    default_path: Optional[Path] = None
) -> ItConfig:
    """
    Load the integration-test configuration.

    Args:
        config_path: Optional explicit path to it_config.json
        default_path: Used when neither config_path nor INFRA_IT_CONFIG is set

    Returns:
        ItConfig with terraform_dir resolved to an absolute path

    Raises:
        ConfigurationError: If the file is missing, invalid, or lacks
                            required fields
    """
    path = resolve_config_path(config_path, default_path)
    raw = _load_json_file(path)

    for key in CONSTANTS.REQUIRED_CONFIG_KEYS:
        if key not in raw:
            raise ConfigurationError(
                f"Missing required field '{key}'",
                config_file=str(path)
            )

    # Relative fixture roots are relative to the config file, not the cwd
    terraform_dir = Path(raw["terraform_dir"])
    if not terraform_dir.is_absolute():
        terraform_dir = (path.parent / terraform_dir).resolve()

    vars = raw.get("vars", {})
    if not isinstance(vars, dict):
        raise ConfigurationError("'vars' must be an object", config_file=str(path))

    binary = os.environ.get(CONSTANTS.BINARY_ENV_VAR) or raw.get("binary") or CONSTANTS.TERRAGRUNT_BINARY

    return ItConfig(
        terraform_dir=terraform_dir,
        expected=_parse_expected(raw["expected"], str(path)),
        binary=binary,
        vars=vars,
        azure=_parse_azure(raw.get("azure", {}), str(path)),
    )
