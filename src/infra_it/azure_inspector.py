"""
Azure SDK checks for provisioned fixtures.

Terraform outputs only say what the fixtures claim to have created. This
module asks Azure Resource Manager directly, so a test can compare the live
resource group, virtual network, subnets and NIC addresses with the
expected values.

Usage:
    inspector = AzureInspector.from_settings(config.azure)
    vnet = inspector.get_virtual_network("rg-edo-dev-testapp", "vnet-edo-dev-testapp")
    vnet.subnets["subnet1"]  # ["10.0.1.0/24"]
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from azure.core.exceptions import AzureError

from .context import AzureSettings
from .exceptions import ExternalToolError

logger = logging.getLogger(__name__)


@dataclass
class VirtualNetworkInfo:
    """Live state of a virtual network."""

    name: str
    address_space: List[str] = field(default_factory=list)
    subnets: Dict[str, List[str]] = field(default_factory=dict)


class AzureInspector:
    """
    Read-only view of Azure resources in one subscription.

    SDK clients are created on first use and cached in self._clients.
    Every SDK failure is raised as ExternalToolError.
    """

    def __init__(self, subscription_id: str, credential: Any = None):
        """
        Args:
            subscription_id: Subscription holding the fixtures
            credential: azure-identity credential (DefaultAzureCredential if None)

        Raises:
            ValueError: If subscription_id is empty
        """
        if not subscription_id:
            raise ValueError("subscription_id is required")

        self._subscription_id = subscription_id
        self._credential = credential
        self._clients: Dict[str, Any] = {}

    @classmethod
    def from_settings(cls, settings: AzureSettings) -> "AzureInspector":
        return cls(settings.subscription, credential=_get_credential(settings))

    @property
    def credential(self) -> Any:
        if self._credential is None:
            from azure.identity import DefaultAzureCredential
            self._credential = DefaultAzureCredential()
        return self._credential

    @property
    def resource_client(self) -> Any:
        if "resource" not in self._clients:
            from azure.mgmt.resource import ResourceManagementClient
            self._clients["resource"] = ResourceManagementClient(
                credential=self.credential, subscription_id=self._subscription_id
            )
        return self._clients["resource"]

    @property
    def network_client(self) -> Any:
        if "network" not in self._clients:
            from azure.mgmt.network import NetworkManagementClient
            self._clients["network"] = NetworkManagementClient(
                credential=self.credential, subscription_id=self._subscription_id
            )
        return self._clients["network"]

    def resource_group_exists(self, name: str) -> bool:
        try:
            return bool(self.resource_client.resource_groups.check_existence(name))
        except AzureError as e:
            raise ExternalToolError(f"resource_groups.check_existence({name})", None, str(e)) from e

    def get_virtual_network(self, resource_group: str, name: str) -> VirtualNetworkInfo:
        """
        Fetch a virtual network with its subnets.

        Subnets report either a single address_prefix or a list of
        address_prefixes; both are normalised to a list.
        """
        try:
            vnet = self.network_client.virtual_networks.get(resource_group, name)
        except AzureError as e:
            raise ExternalToolError(
                f"virtual_networks.get({resource_group}/{name})", None, str(e)
            ) from e

        address_space = []
        if vnet.address_space and vnet.address_space.address_prefixes:
            address_space = list(vnet.address_space.address_prefixes)

        subnets = {}
        for subnet in vnet.subnets or []:
            if subnet.address_prefixes:
                subnets[subnet.name] = list(subnet.address_prefixes)
            elif subnet.address_prefix:
                subnets[subnet.name] = [subnet.address_prefix]
            else:
                subnets[subnet.name] = []

        logger.debug(f"Virtual network {name}: {address_space}, subnets={subnets}")
        return VirtualNetworkInfo(name=vnet.name, address_space=address_space, subnets=subnets)

    def list_private_ips(self, resource_group: str) -> List[str]:
        """Private IPs of every network interface in the resource group."""
        try:
            interfaces = list(self.network_client.network_interfaces.list(resource_group))
        except AzureError as e:
            raise ExternalToolError(f"network_interfaces.list({resource_group})", None, str(e)) from e

        ips = []
        for nic in interfaces:
            for ip_config in nic.ip_configurations or []:
                if ip_config.private_ip_address:
                    ips.append(ip_config.private_ip_address)
        return ips


def _get_credential(settings: AzureSettings) -> Optional[Any]:
    """Service principal credential if configured, else None (DefaultAzureCredential)."""
    if settings.has_service_principal:
        from azure.identity import ClientSecretCredential
        return ClientSecretCredential(
            tenant_id=settings.tenant,
            client_id=settings.client_id,
            client_secret=settings.client_secret
        )
    return None
