# ==========================================
# 1. Configuration
# ==========================================
IT_CONFIG_FILE = "it_config.json"
IT_CONFIG_ENV_VAR = "INFRA_IT_CONFIG"
DEBUG_ENV_VAR = "INFRA_IT_DEBUG"

REQUIRED_CONFIG_KEYS = ["terraform_dir", "expected"]
REQUIRED_EXPECTED_KEYS = ["resource_group_name", "vnet_name", "vnet_address_space", "subnets"]

# Environment variables that override values in it_config.json
AZURE_ENV_OVERRIDES = {
    "tenant": "AZURE_TENANT_ID",
    "subscription": "AZURE_SUBSCRIPTION_ID",
    "client_id": "AZURE_CLIENT_ID",
    "client_secret": "AZURE_CLIENT_SECRET",
}
BINARY_ENV_VAR = "TERRAGRUNT_BINARY"

# ==========================================
# 2. Terragrunt
# ==========================================
TERRAGRUNT_BINARY = "terragrunt"

# Terraform reports a missing output with one of these phrases
OUTPUT_NOT_FOUND_PATTERN = (
    r'Output "[^"]*" not found'
    r"|output variable requested could not be found"
)

# ==========================================
# 3. Fixture Submodules & Outputs
# ==========================================
RESOURCE_GROUP_MODULE = "/resource_group"
VIRTUAL_NETWORK_MODULE = "/virtual_network"
VIRTUAL_MACHINE_MODULE = "/virtual_machine"

OUTPUT_RESOURCE_GROUP_NAME = "resource_group_name"
OUTPUT_VNET_NAME = "vnet_name"
OUTPUT_VNET_ADDRESS_SPACE = "vnet_address_space"
OUTPUT_SUBNET_ADDRESS_SPACES = "subnet_address_spaces"
OUTPUT_VM_PRIVATE_IP = "private_ip_address"
