"""
Fixture output resolver.

Reads a named output from a submodule of a fixture tree and decodes it as a
scalar, a list of strings or a map of string lists. The submodule directory
is computed per call from the handle's root, so the handle is never changed.
Nothing here retries: a failed lookup fails the calling test.
"""

import json
import logging

from .context import FixtureHandle, OutputRequest, OutputShape, OutputValue
from .exceptions import DecodeError, ExternalToolError, OutputNotFoundError

logger = logging.getLogger(__name__)


def _fetch(handle: FixtureHandle, request: OutputRequest) -> str:
    target = handle.target_for(request.path)
    logger.debug(f"Resolving {request.name} from {target}")
    try:
        return handle.runner.output(target, request.name)
    except OutputNotFoundError as e:
        raise OutputNotFoundError(request.name, request.path) from e
    except ExternalToolError as e:
        raise ExternalToolError(
            e.command, e.return_code, e.stderr,
            output_name=request.name, submodule_path=request.path
        ) from e


def _decode_json(raw: str, request: OutputRequest):
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise DecodeError(f"invalid JSON ({e.msg})", raw, request.name, request.path) from e


def _check_string_list(value, raw: str, request: OutputRequest) -> list[str]:
    if not isinstance(value, list):
        raise DecodeError(
            f"expected a list, got {type(value).__name__}", raw, request.name, request.path
        )
    for item in value:
        if not isinstance(item, str):
            raise DecodeError(
                f"list element {item!r} is not a string", raw, request.name, request.path
            )
    return value


def resolve_scalar(handle: FixtureHandle, request: OutputRequest) -> str:
    """Return the raw string value of a submodule output."""
    return _fetch(handle, request)


def resolve_sequence(handle: FixtureHandle, request: OutputRequest) -> list[str]:
    """
    Return a submodule output decoded as a JSON array of strings.

    Raises:
        DecodeError: If the raw value is not JSON or holds non-string elements
    """
    raw = _fetch(handle, request)
    return _check_string_list(_decode_json(raw, request), raw, request)


def resolve_mapping(handle: FixtureHandle, request: OutputRequest) -> dict[str, list[str]]:
    """
    Return a submodule output decoded as a JSON object of string arrays.

    Raises:
        DecodeError: If the raw value is not a JSON object whose values are
                     arrays of strings
    """
    raw = _fetch(handle, request)
    value = _decode_json(raw, request)

    if not isinstance(value, dict):
        raise DecodeError(
            f"expected an object, got {type(value).__name__}", raw, request.name, request.path
        )

    return {key: _check_string_list(item, raw, request) for key, item in value.items()}


_RESOLVERS = {
    OutputShape.SCALAR: resolve_scalar,
    OutputShape.SEQUENCE: resolve_sequence,
    OutputShape.MAPPING: resolve_mapping,
}


def resolve(handle: FixtureHandle, request: OutputRequest) -> OutputValue:
    """Resolve an output according to request.shape."""
    return _RESOLVERS[request.shape](handle, request)
