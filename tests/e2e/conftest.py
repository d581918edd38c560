"""
E2E Test Fixtures.

Provides fixtures that provision the Terragrunt fixture tree against a real
Azure subscription. These tests deploy REAL resources and incur costs.

Run with: pytest -m live
"""
import shutil
from pathlib import Path

import pytest

from infra_it.azure_inspector import AzureInspector
from infra_it.config_loader import load_it_config
from infra_it.context import FixtureHandle
from infra_it.logger import logger, print_stack_trace
from infra_it.terragrunt_runner import TerragruntRunner


@pytest.fixture(scope="session")
def it_config():
    """
    Integration-test configuration.

    INFRA_IT_CONFIG points at another file; otherwise the it_config.json
    next to this conftest is used.
    """
    return load_it_config(default_path=Path(__file__).parent / "it_config.json")


@pytest.fixture(scope="session")
def azure_settings(it_config):
    """
    Azure settings for the live run.

    Skips when no subscription is configured in the file or through
    AZURE_SUBSCRIPTION_ID.
    """
    if not it_config.azure.subscription:
        pytest.skip(
            "Azure subscription not configured. "
            "Set azure.subscription in it_config.json or AZURE_SUBSCRIPTION_ID."
        )

    # Terraform's azurerm provider reads the ARM_* variables
    env = {"ARM_SUBSCRIPTION_ID": it_config.azure.subscription}
    if it_config.azure.tenant:
        env["ARM_TENANT_ID"] = it_config.azure.tenant
    if it_config.azure.has_service_principal:
        env["ARM_CLIENT_ID"] = it_config.azure.client_id
        env["ARM_CLIENT_SECRET"] = it_config.azure.client_secret

    return it_config.azure, env


@pytest.fixture(scope="session")
def fixture_handle(request, it_config, azure_settings):
    """
    Apply the whole fixture tree with GUARANTEED cleanup.

    `run-all destroy` is registered before `run-all apply` so it runs even
    when apply fails half way.
    """
    if shutil.which(it_config.binary) is None:
        pytest.skip(f"{it_config.binary} not found on PATH")

    _, env = azure_settings
    runner = TerragruntRunner(binary=it_config.binary, vars=it_config.vars, env=env)
    handle = FixtureHandle(root_path=str(it_config.terraform_dir), runner=runner)

    def destroy_fixtures():
        logger.info("CLEANUP: running run-all destroy")
        try:
            handle.destroy_all()
        except Exception as e:
            print_stack_trace()
            logger.error(f"Destroy failed: {e}")
            logger.error(
                f"Some resources may still exist. Please delete resource group "
                f"{it_config.expected.resource_group_name} manually."
            )
            raise

    request.addfinalizer(destroy_fixtures)

    try:
        handle.apply_all()
    except Exception as e:
        pytest.fail(f"Fixture provisioning failed: {e}")

    return handle


@pytest.fixture(scope="session")
def azure_inspector(azure_settings):
    settings, _ = azure_settings
    return AzureInspector.from_settings(settings)
