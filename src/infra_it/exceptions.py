"""
Custom exceptions for the infrastructure integration tests.

Every failure the toolkit can surface to a test is one of the classes below.
None of them are retried locally: a raised error fails the enclosing test.

Exception Hierarchy:
    FixtureOutputError (base)
    ├── OutputNotFoundError - Output name absent from the fixture's outputs
    ├── DecodeError - Raw output does not match the requested shape
    └── ExternalToolError - terragrunt/terraform or Azure SDK call failed
    ConfigurationError - Invalid or missing integration-test configuration
"""

from typing import Optional


class FixtureOutputError(Exception):
    """
    Base exception for all fixture output errors.

    Attributes:
        message: Human-readable error description
        output_name: Optional output that was being resolved
        submodule_path: Optional fixture submodule path (e.g. "/virtual_network")
    """

    def __init__(
        self,
        message: str,
        output_name: Optional[str] = None,
        submodule_path: Optional[str] = None
    ):
        self.message = message
        self.output_name = output_name
        self.submodule_path = submodule_path

        # Build detailed message with context
        details = []
        if output_name:
            details.append(f"output={output_name}")
        if submodule_path:
            details.append(f"path={submodule_path}")

        if details:
            full_message = f"{message} [{', '.join(details)}]"
        else:
            full_message = message

        super().__init__(full_message)


class OutputNotFoundError(FixtureOutputError):
    """
    Raised when the requested output is not published by the fixture.

    This typically occurs when:
    - A typo in the output name (e.g., "vnet_names" instead of "vnet_name")
    - The fixture was never applied, so its state holds no outputs
    - The output was added to the module after the last apply

    Example:
        >>> resolve_scalar(handle, OutputRequest("/resource_group", "missing"))
        OutputNotFoundError: Output 'missing' not found [output=missing, path=/resource_group]
    """

    def __init__(self, output_name: str, submodule_path: Optional[str] = None):
        super().__init__(
            f"Output '{output_name}' not found",
            output_name=output_name,
            submodule_path=submodule_path
        )


class DecodeError(FixtureOutputError):
    """
    Raised when a raw output value cannot be decoded into the requested shape.

    Attributes:
        raw_value: The text that failed to decode
    """

    def __init__(
        self,
        reason: str,
        raw_value: str,
        output_name: Optional[str] = None,
        submodule_path: Optional[str] = None
    ):
        self.raw_value = raw_value
        super().__init__(
            f"Cannot decode output value {raw_value!r}: {reason}",
            output_name=output_name,
            submodule_path=submodule_path
        )


class ExternalToolError(FixtureOutputError):
    """
    Raised when an external call (terragrunt, terraform, Azure SDK) fails.

    Attributes:
        command: The command or SDK operation that failed (e.g. "output")
        return_code: Process exit code, None for SDK or launch failures
        stderr: Captured error output
    """

    def __init__(
        self,
        command: str,
        return_code: Optional[int],
        stderr: str,
        output_name: Optional[str] = None,
        submodule_path: Optional[str] = None
    ):
        self.command = command
        self.return_code = return_code
        self.stderr = stderr

        if return_code is None:
            message = f"{command} failed: {stderr}"
        else:
            message = f"{command} failed (exit {return_code}): {stderr}"

        super().__init__(
            message,
            output_name=output_name,
            submodule_path=submodule_path
        )


class ConfigurationError(Exception):
    """
    Raised when the integration-test configuration is invalid or missing.

    This typically occurs when:
    - it_config.json does not exist
    - The file has invalid JSON
    - A required key is missing (e.g. "terraform_dir")

    Example:
        >>> load_it_config(Path("nonexistent.json"))
        ConfigurationError: Configuration file not found (file: nonexistent.json)
    """

    def __init__(self, message: str, config_file: Optional[str] = None):
        self.config_file = config_file
        if config_file:
            message = f"{message} (file: {config_file})"
        super().__init__(message)
