"""
Integration-test toolkit for Terragrunt-provisioned Azure fixtures.

Public API:
    FixtureHandle, OutputRequest, OutputShape - fixture and output types
    resolve_scalar, resolve_sequence, resolve_mapping, resolve - output resolver
    TerragruntRunner - terragrunt/terraform CLI wrapper
    load_it_config - integration-test configuration
"""

from .logger import setup_logger
from .context import FixtureHandle, OutputRequest, OutputShape
from .exceptions import (
    ConfigurationError,
    DecodeError,
    ExternalToolError,
    FixtureOutputError,
    OutputNotFoundError,
)
from .resolver import resolve, resolve_mapping, resolve_scalar, resolve_sequence
from .terragrunt_runner import TerragruntRunner
from .config_loader import load_it_config

__all__ = [
    "FixtureHandle",
    "OutputRequest",
    "OutputShape",
    "ConfigurationError",
    "DecodeError",
    "ExternalToolError",
    "FixtureOutputError",
    "OutputNotFoundError",
    "resolve",
    "resolve_mapping",
    "resolve_scalar",
    "resolve_sequence",
    "TerragruntRunner",
    "load_it_config",
    "setup_logger",
]
