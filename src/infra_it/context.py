"""
Fixture handle and output request types.

A FixtureHandle names the root of a Terragrunt fixture tree and the runner
used to reach it. Submodule directories are never stored on the handle:
every call computes root_path + submodule_path and passes the result to the
runner explicitly, so a handle can be shared by any number of calls without
one of them observing another's target.

Usage:
    handle = FixtureHandle(root_path="terraform/environments/dev", runner=runner)
    request = OutputRequest("/virtual_network", "vnet_address_space", OutputShape.SEQUENCE)
    handle.target_for(request.path)  # "terraform/environments/dev/virtual_network"
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .terragrunt_runner import TerragruntRunner


OutputValue = Union[str, List[str], Dict[str, List[str]]]


class OutputShape(Enum):
    """Expected shape of a fixture output."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


@dataclass(frozen=True)
class OutputRequest:
    """
    A single output to read from a fixture submodule.

    Attributes:
        path: Submodule path relative to the fixture root (e.g. "/virtual_network")
        name: Output name published by the submodule
        shape: How the raw value is decoded
    """

    path: str
    name: str
    shape: OutputShape = OutputShape.SCALAR

    def __post_init__(self):
        if not isinstance(self.shape, OutputShape):
            raise ValueError(f"Unknown output shape: {self.shape!r}")


@dataclass(frozen=True)
class FixtureHandle:
    """
    Points at the root of a fixture tree.

    Attributes:
        root_path: Canonical fixture root (the directory run-all apply targets)
        runner: TerragruntRunner used for every external call
    """

    root_path: str
    runner: "TerragruntRunner"

    @property
    def current_target(self) -> str:
        """Directory the next root-level call (apply/destroy) runs in."""
        return self.root_path

    def target_for(self, submodule_path: str) -> str:
        """
        Join the fixture root with a submodule path.

        The submodule path keeps its leading slash convention
        ("/virtual_network"), so this is plain concatenation with a
        single separator.
        """
        if not submodule_path:
            return self.root_path
        return self.root_path.rstrip("/") + "/" + submodule_path.lstrip("/")

    def apply_all(self) -> None:
        self.runner.apply_all(self.current_target)

    def destroy_all(self) -> None:
        self.runner.destroy_all(self.current_target)


@dataclass
class AzureSettings:
    """
    Azure tenant and subscription the live checks run against.

    client_id/client_secret are optional; without them the inspector falls
    back to DefaultAzureCredential (Azure CLI login, managed identity, ...).
    """

    tenant: str = ""
    subscription: str = ""
    client_id: str = ""
    client_secret: str = ""

    @property
    def has_service_principal(self) -> bool:
        return bool(self.tenant and self.client_id and self.client_secret)


@dataclass
class ExpectedInfrastructure:
    """
    Literal values the provisioned fixtures must match.

    Attributes:
        resource_group_name: e.g. "rg-edo-dev-testapp"
        vnet_name: e.g. "vnet-edo-dev-testapp"
        vnet_address_space: First address prefix of the vnet
        subnets: Subnet name to its first address prefix
        important_ip_address: Private IP the VM's NIC must carry (optional)
    """

    resource_group_name: str
    vnet_name: str
    vnet_address_space: str
    subnets: Dict[str, str] = field(default_factory=dict)
    important_ip_address: Optional[str] = None


@dataclass
class ItConfig:
    """
    Parsed integration-test configuration from it_config.json.

    Attributes:
        terraform_dir: Absolute fixture root
        binary: terragrunt or terraform executable
        vars: Input variables for apply/destroy
        azure: Tenant/subscription settings
        expected: Values the outputs and live resources must match
    """

    terraform_dir: Path
    expected: ExpectedInfrastructure
    binary: str = "terragrunt"
    vars: Dict[str, Any] = field(default_factory=dict)
    azure: AzureSettings = field(default_factory=AzureSettings)
