"""Immutable registry of every operation the server exposes.

The registry is built once from the category modules, in a fixed order:
basic, bookmark, advanced (history rewriting), git (remote/networking) for
actions, then the read-only views. Nothing is added after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence

from mcp.types import ToolAnnotations

from jj_mcp.config import BASE_LOGGER
from jj_mcp.exceptions import OperationInputError, RegistryError, UnknownOperationError
from jj_mcp.mcp_server.decorators import instrument
from jj_mcp.mcp_server.schemas import (
    forbid_extra_arguments,
    input_schema_for,
    schema_hash,
    validate_arguments,
)
from jj_mcp.operations import advanced, basic, bookmarks, git, views
from jj_mcp.operations._shared import ActionSpec, ViewSpec, contents_envelope, text_envelope

ACTION_GROUPS: tuple[tuple[ActionSpec, ...], ...] = (
    basic.ACTIONS,
    bookmarks.ACTIONS,
    advanced.ACTIONS,
    git.ACTIONS,
)
VIEW_GROUPS: tuple[tuple[ViewSpec, ...], ...] = (views.VIEWS,)


@dataclass(frozen=True)
class Registry:
    actions: tuple[ActionSpec, ...]
    views: tuple[ViewSpec, ...]
    _actions_by_name: Mapping[str, ActionSpec] = field(init=False, repr=False, compare=False)
    _views_by_uri: Mapping[str, ViewSpec] = field(init=False, repr=False, compare=False)
    _schemas: Mapping[str, Dict[str, Any]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        actions_by_name: Dict[str, ActionSpec] = {}
        for spec in self.actions:
            if spec.name in actions_by_name:
                raise RegistryError(f"Duplicate action name: {spec.name!r}")
            actions_by_name[spec.name] = spec

        views_by_uri: Dict[str, ViewSpec] = {}
        view_names: set[str] = set()
        for view in self.views:
            if view.uri in views_by_uri:
                raise RegistryError(f"Duplicate view uri: {view.uri!r}")
            if view.name in view_names or view.name in actions_by_name:
                raise RegistryError(f"Duplicate operation name: {view.name!r}")
            views_by_uri[view.uri] = view
            view_names.add(view.name)

        schemas = {spec.name: input_schema_for(spec.handler, name=spec.name) for spec in self.actions}

        # Frozen dataclass: derived indexes are set once here.
        object.__setattr__(self, "_actions_by_name", MappingProxyType(actions_by_name))
        object.__setattr__(self, "_views_by_uri", MappingProxyType(views_by_uri))
        object.__setattr__(self, "_schemas", MappingProxyType(schemas))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def names(self) -> list[str]:
        return [spec.name for spec in self.actions]

    def uris(self) -> list[str]:
        return [view.uri for view in self.views]

    def action(self, name: str) -> ActionSpec:
        try:
            return self._actions_by_name[name]
        except KeyError:
            raise UnknownOperationError(name) from None

    def view(self, uri: str) -> ViewSpec:
        try:
            return self._views_by_uri[uri]
        except KeyError:
            raise UnknownOperationError(uri) from None

    def input_schema(self, name: str) -> Dict[str, Any]:
        self.action(name)
        return dict(self._schemas[name])

    # ------------------------------------------------------------------
    # Dispatch (host-independent)
    # ------------------------------------------------------------------

    def validate(self, name: str, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Check ``arguments`` against the action's contract; unknown fields are rejected."""

        args = dict(arguments or {})
        validate_arguments(name, self.input_schema(name), args)
        return args

    async def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Validate, run and wrap one action call into a content envelope.

        Input errors come back as an envelope with ``isError: true``;
        ``UnknownOperationError`` propagates.
        """

        spec = self.action(name)
        call = instrument(spec.name, spec.handler, schema_hash=schema_hash(self._schemas[name]))
        try:
            args = self.validate(name, arguments)
            text = await call(**args)
        except OperationInputError as exc:
            return text_envelope(str(exc), is_error=True)
        return text_envelope(text)

    async def read(self, uri: str) -> Dict[str, Any]:
        view = self.view(uri)
        text = await instrument(view.name, view.handler)()
        return contents_envelope(view.uri, text, mime_type=view.mime_type)

    # ------------------------------------------------------------------
    # Host publication
    # ------------------------------------------------------------------

    def publish(self, mcp: Any) -> None:
        """Register every action and view with a FastMCP server, in registry order.

        Published tools reject unknown argument keys, like ``validate``.
        """

        tool_manager = getattr(mcp, "_tool_manager", None)
        for spec in self.actions:
            mcp.add_tool(
                instrument(spec.name, spec.handler, schema_hash=schema_hash(self._schemas[spec.name])),
                name=spec.name,
                title=spec.title,
                description=spec.description,
                annotations=ToolAnnotations(
                    title=spec.title,
                    readOnlyHint=spec.read_only,
                    destructiveHint=spec.destructive,
                    idempotentHint=spec.read_only,
                ),
            )
            if tool_manager is not None:
                forbid_extra_arguments(tool_manager.get_tool(spec.name))

        for view in self.views:
            mcp.resource(
                view.uri,
                name=view.name,
                title=view.title,
                description=view.description,
                mime_type=view.mime_type,
            )(instrument(view.name, view.handler))

        BASE_LOGGER.info(
            "Registered %d actions and %d views",
            len(self.actions),
            len(self.views),
            extra={"event": "registry_published"},
        )


def build_registry(
    action_groups: Sequence[Sequence[ActionSpec]] = ACTION_GROUPS,
    view_groups: Sequence[Sequence[ViewSpec]] = VIEW_GROUPS,
) -> Registry:
    return Registry(
        actions=tuple(spec for group in action_groups for spec in group),
        views=tuple(view for group in view_groups for view in group),
    )


__all__ = [
    "ACTION_GROUPS",
    "VIEW_GROUPS",
    "Registry",
    "build_registry",
]
