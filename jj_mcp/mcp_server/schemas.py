"""Schema + validation helpers.

Input schemas are derived from each handler's annotated signature with the
same machinery FastMCP uses when it publishes a tool, so the contract the
host sees and the contract the registry validates against cannot drift.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Callable, Dict, Mapping

import jsonschema
from mcp.server.fastmcp.tools import Tool
from pydantic import ConfigDict

from jj_mcp.exceptions import OperationInputError


def input_schema_for(handler: Callable[..., Any], *, name: str) -> Dict[str, Any]:
    """Return the JSON schema for ``handler``'s arguments with unknown fields rejected."""

    tool = Tool.from_function(handler, name=name)
    schema = dict(tool.parameters)
    schema["additionalProperties"] = False
    return schema


def forbid_extra_arguments(tool: Tool) -> None:
    """Make a published FastMCP tool reject argument keys it does not declare.

    FastMCP validates calls against ``tool.fn_metadata.arg_model``, which
    ignores unknown keys by default.
    """

    base = tool.fn_metadata.arg_model

    class StrictArguments(base):  # type: ignore[misc, valid-type]
        model_config = ConfigDict(extra="forbid")

    StrictArguments.__name__ = base.__name__
    StrictArguments.__qualname__ = base.__qualname__
    tool.fn_metadata.arg_model = StrictArguments
    tool.parameters["additionalProperties"] = False


def schema_hash(schema: Mapping[str, Any]) -> str:
    raw = json.dumps(schema, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]


def validate_arguments(tool_name: str, schema: Mapping[str, Any], arguments: Mapping[str, Any]) -> None:
    """Raise ``OperationInputError`` for the most relevant schema violation, if any."""

    validator_cls = jsonschema.validators.validator_for(schema)
    validator = validator_cls(schema)
    error = jsonschema.exceptions.best_match(validator.iter_errors(dict(arguments)))
    if error is None:
        return

    path = list(error.absolute_path)
    field = str(path[0]) if path else None
    message = error.message
    if field:
        message = f"{message} (field={field})"
    raise OperationInputError(tool_name, f"Invalid arguments for {tool_name}: {message}", field=field)


__all__ = [
    "forbid_extra_arguments",
    "input_schema_for",
    "schema_hash",
    "validate_arguments",
]
