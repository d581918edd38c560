"""
Terragrunt CLI Wrapper for Infrastructure Integration Tests.

This module provides a Python interface to Terragrunt (or plain Terraform)
for tests that provision a fixture tree, read its outputs and destroy it
again. The working directory is an argument of every call; the runner itself
holds only the binary, the input variables and extra environment.

Usage:
    from infra_it.terragrunt_runner import TerragruntRunner

    runner = TerragruntRunner(vars={"suffix": ["edo", "dev"]})
    runner.apply_all("terraform/environments/dev")
    name = runner.output("terraform/environments/dev/resource_group", "resource_group_name")
    runner.destroy_all("terraform/environments/dev")
"""

import json
import logging
import os
import re
import subprocess
from pathlib import Path
from typing import Any, Dict, Optional

from . import constants as CONSTANTS
from .exceptions import ExternalToolError, OutputNotFoundError

logger = logging.getLogger(__name__)

_NOT_FOUND_RE = re.compile(CONSTANTS.OUTPUT_NOT_FOUND_PATTERN, re.IGNORECASE)


class TerragruntRunner:
    """
    Wraps Terragrunt CLI commands for fixture provisioning and output lookup.

    With the terragrunt binary, apply_all/destroy_all use `run-all` so every
    submodule under the working directory is handled in dependency order.
    With plain terraform they fall back to init + apply/destroy of the one
    directory.

    Attributes:
        binary: Executable name or path ("terragrunt" or "terraform")
        vars: Input variables passed as -var arguments to apply/destroy
        env: Extra environment variables for every command
    """

    def __init__(
        self,
        binary: str = CONSTANTS.TERRAGRUNT_BINARY,
        vars: Optional[Dict[str, Any]] = None,
        env: Optional[Dict[str, str]] = None
    ):
        """
        Initialize the runner.

        Args:
            binary: Executable to invoke
            vars: Terraform input variables (lists/maps are rendered as JSON)
            env: Additional environment variables, merged over os.environ

        Raises:
            ValueError: If binary is empty
        """
        if not binary:
            raise ValueError("binary is required")

        self.binary = binary
        self.vars = dict(vars or {})
        self.env = dict(env or {})

    @property
    def is_terragrunt(self) -> bool:
        return Path(self.binary).name.startswith(CONSTANTS.TERRAGRUNT_BINARY)

    def _var_args(self) -> list[str]:
        """Render self.vars as -var arguments."""
        args = []
        for key, value in self.vars.items():
            rendered = value if isinstance(value, str) else json.dumps(value)
            args.extend(["-var", f"{key}={rendered}"])
        return args

    def _run_command(
        self,
        args: list[str],
        working_dir: str,
        check: bool = True,
        stream_output: bool = False
    ) -> subprocess.CompletedProcess:
        """
        Run a command in working_dir.

        Args:
            args: Command arguments (without the binary)
            working_dir: Directory the command runs in
            check: Whether to raise on non-zero exit
            stream_output: If True, log output line by line (long-running commands)

        Returns:
            CompletedProcess with command results

        Raises:
            ExternalToolError: If the binary cannot be started, or the
                               command fails and check=True
        """
        cmd = [self.binary] + args
        logger.info(f"Running: {' '.join(cmd)} (in {working_dir})")

        env = {**os.environ, **self.env} if self.env else None

        try:
            if stream_output:
                # Stream output to the log and capture it for error handling
                with subprocess.Popen(
                    cmd,
                    cwd=working_dir,
                    env=env,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    encoding="utf-8",
                    bufsize=1
                ) as process:
                    output_lines = []
                    try:
                        for line in process.stdout:
                            logger.info(line.rstrip())
                            output_lines.append(line)
                    except UnicodeDecodeError:
                        process.kill()
                        raise
                    process.wait()

                result = subprocess.CompletedProcess(
                    args=cmd,
                    returncode=process.returncode,
                    stdout="".join(output_lines),
                    stderr=None
                )
            else:
                result = subprocess.run(
                    cmd,
                    cwd=working_dir,
                    env=env,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    check=False
                )
        except OSError as e:
            raise ExternalToolError(
                args[0], None, f"cannot run {self.binary} in {working_dir}: {e}"
            ) from e
        except UnicodeDecodeError as e:
            raise ExternalToolError(
                args[0], None, f"{self.binary} wrote output that is not valid UTF-8: {e}"
            ) from e

        if check and result.returncode != 0:
            raise ExternalToolError(args[0], result.returncode, _error_output(result))

        return result

    def apply_all(self, working_dir: str) -> None:
        """
        Provision every fixture under working_dir.

        Raises:
            ExternalToolError: If apply fails
        """
        logger.info(f"Applying fixtures in {working_dir}...")
        if self.is_terragrunt:
            args = ["run-all", "apply", "-auto-approve", "--terragrunt-non-interactive"]
            self._run_command(args + self._var_args(), working_dir, stream_output=True)
        else:
            self._run_command(["init", "-input=false"], working_dir)
            args = ["apply", "-auto-approve", "-input=false"]
            self._run_command(args + self._var_args(), working_dir, stream_output=True)
        logger.info("✓ Apply complete")

    def destroy_all(self, working_dir: str) -> None:
        """
        Destroy every fixture under working_dir.

        Raises:
            ExternalToolError: If destroy fails
        """
        logger.info(f"Destroying fixtures in {working_dir}...")
        if self.is_terragrunt:
            args = ["run-all", "destroy", "-auto-approve", "--terragrunt-non-interactive"]
        else:
            args = ["destroy", "-auto-approve", "-input=false"]
        self._run_command(args + self._var_args(), working_dir, stream_output=True)
        logger.info("✓ Destroy complete")

    def output(self, working_dir: str, name: str) -> str:
        """
        Fetch one named output as raw text.

        String values are returned unquoted; lists, maps and other JSON
        values are returned as compact JSON text.

        Args:
            working_dir: Fixture directory holding the state
            name: Output name

        Returns:
            Raw output text

        Raises:
            OutputNotFoundError: If the fixture does not publish `name`
            ExternalToolError: If the command fails for any other reason
        """
        result = self._run_command(["output", "-json", name], working_dir, check=False)

        if result.returncode != 0:
            error_output = _error_output(result)
            if _NOT_FOUND_RE.search(error_output):
                raise OutputNotFoundError(name, working_dir)
            raise ExternalToolError(
                "output", result.returncode, error_output,
                output_name=name, submodule_path=working_dir
            )

        raw = result.stdout.strip()
        if not raw:
            raise OutputNotFoundError(name, working_dir)

        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ExternalToolError(
                "output", result.returncode, f"unparsable output {raw!r}: {e}",
                output_name=name, submodule_path=working_dir
            ) from e

        logger.debug(f"Output {name} in {working_dir}: {raw}")

        if isinstance(value, str):
            return value
        return json.dumps(value, separators=(",", ":"))

    def outputs(self, working_dir: str) -> dict:
        """
        Get all outputs of one fixture directory.

        Returns:
            Dictionary of output name to unwrapped value

        Raises:
            ExternalToolError: If the output command fails
        """
        result = self._run_command(["output", "-json"], working_dir)

        if not result.stdout.strip():
            return {}

        try:
            outputs = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ExternalToolError("output", result.returncode, f"unparsable output: {e}") from e

        # Unwrap the value from Terraform's output format
        return {k: v.get("value") for k, v in outputs.items()}


def _error_output(result: subprocess.CompletedProcess) -> str:
    """Combine stdout and stderr for full error context."""
    error_output = ""
    if result.stdout:
        error_output += result.stdout
    if result.stderr:
        error_output += "\n" + result.stderr if error_output else result.stderr
    if not error_output:
        error_output = "No output captured"
    return error_output
