"""
Unit tests for the exception hierarchy.
"""

from infra_it.exceptions import (
    ConfigurationError,
    DecodeError,
    ExternalToolError,
    FixtureOutputError,
    OutputNotFoundError,
)


class TestExceptionHierarchy:
    """All resolver errors share one base class."""

    def test_subclasses(self):
        assert issubclass(OutputNotFoundError, FixtureOutputError)
        assert issubclass(DecodeError, FixtureOutputError)
        assert issubclass(ExternalToolError, FixtureOutputError)
        assert not issubclass(ConfigurationError, FixtureOutputError)

    def test_context_in_message(self):
        error = OutputNotFoundError("vnet_name", "/virtual_network")
        assert str(error) == "Output 'vnet_name' not found [output=vnet_name, path=/virtual_network]"

    def test_message_without_context(self):
        assert str(FixtureOutputError("plain")) == "plain"

    def test_external_tool_error_with_exit_code(self):
        error = ExternalToolError("apply", 2, "boom")
        assert str(error) == "apply failed (exit 2): boom"

    def test_external_tool_error_without_exit_code(self):
        error = ExternalToolError("virtual_networks.get(rg/vnet)", None, "forbidden")
        assert str(error) == "virtual_networks.get(rg/vnet) failed: forbidden"

    def test_decode_error_keeps_raw_value(self):
        error = DecodeError("invalid JSON", "not-json", "vnet_address_space", "/virtual_network")
        assert error.raw_value == "not-json"
        assert "'not-json'" in str(error)

    def test_configuration_error_file(self):
        error = ConfigurationError("Missing required field 'expected'", config_file="it_config.json")
        assert str(error) == "Missing required field 'expected' (file: it_config.json)"

