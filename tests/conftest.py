import os
import sys
import json
from unittest.mock import MagicMock

import pytest

# Set PYTHONPATH to include src if the package is not installed
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from infra_it.context import FixtureHandle
from infra_it.exceptions import OutputNotFoundError


@pytest.fixture(scope="function", autouse=True)
def clean_env_vars(request, monkeypatch):
    """Remove environment overrides so config tests only see their own files."""
    if request.node.get_closest_marker("live"):
        return
    for var in [
        "AZURE_TENANT_ID",
        "AZURE_SUBSCRIPTION_ID",
        "AZURE_CLIENT_ID",
        "AZURE_CLIENT_SECRET",
        "TERRAGRUNT_BINARY",
        "INFRA_IT_CONFIG",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def fixture_outputs():
    """
    Raw outputs keyed by (target directory, output name).

    Tests add entries before resolving; anything missing behaves like an
    output the fixture does not publish.
    """
    return {
        ("fixtures/dev/resource_group", "resource_group_name"): "rg-edo-dev-testapp",
        ("fixtures/dev/virtual_network", "vnet_name"): "vnet-edo-dev-testapp",
        ("fixtures/dev/virtual_network", "vnet_address_space"): '["10.0.0.0/16"]',
        ("fixtures/dev/virtual_network", "subnet_address_spaces"): json.dumps(
            {"subnet1": ["10.0.1.0/24"], "subnet2": ["10.0.2.0/24"]}
        ),
    }


@pytest.fixture
def mock_runner(fixture_outputs):
    """TerragruntRunner stand-in serving fixture_outputs."""
    runner = MagicMock()

    def output(working_dir, name):
        try:
            return fixture_outputs[(working_dir, name)]
        except KeyError:
            raise OutputNotFoundError(name, working_dir)

    runner.output.side_effect = output
    return runner


@pytest.fixture
def handle(mock_runner):
    return FixtureHandle(root_path="fixtures/dev", runner=mock_runner)
