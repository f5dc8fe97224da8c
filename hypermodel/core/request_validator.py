"""Request Validation — gate checked before any deserialization or store access.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return ApiError on violation, None on success
    - validate_request chains all checks — first error wins
    - Envelope and identity checks only apply to create/update

Design Decisions:
    - Return values (not exceptions): the orchestrator hands the error back to
      the route unchanged, same shape as a handler outcome
"""

from typing import Any

from hypermodel.core.domain_types import RequestAction, TypeName
from hypermodel.core.errors import ApiError, bad_request, not_found
from hypermodel.core.model_registry import ModelRegistry

_WRITE_ACTIONS = frozenset({RequestAction.CREATE, RequestAction.UPDATE})


def _data_member(payload: Any) -> Any:
    if not isinstance(payload, dict):
        return None
    return payload.get("data")


def check_type(registry: ModelRegistry, type_name: TypeName) -> ApiError | None:
    """Rule 1: the type must be registered."""
    if not registry.exists(type_name):
        return not_found(f"No API resource exists for type: {type_name}")
    return None


def check_envelope(payload: Any) -> ApiError | None:
    """Rule 2: payload carries a data container with a `type` member."""
    data = _data_member(payload)
    if not data or not isinstance(data, dict):
        return bad_request("No data member was found in the request.")
    if not data.get("type"):
        return bad_request("All data payloads must contain the `type` member.")
    return None


def check_identity(payload: Any, action: RequestAction) -> ApiError | None:
    """Rule 3: no client id on create; an id is required on update."""
    data = _data_member(payload) or {}
    if action is RequestAction.CREATE and data.get("id"):
        return bad_request(
            "Client generated identifiers are not supported. "
            "Remove the `id` member and try again.",
        )
    if action is RequestAction.UPDATE and not data.get("id"):
        return bad_request("All update requests must contain the `id` member.")
    return None


def check_type_matches(payload: Any, type_name: TypeName) -> ApiError | None:
    """Rule 4: the payload type must name the resource addressed by the URL."""
    data = _data_member(payload) or {}
    if data.get("type") != type_name:
        return bad_request(
            f"The `type` member '{data.get('type')}' does not match "
            f"the resource type '{type_name}' of the request URI.",
        )
    return None


def validate_request(
    registry: ModelRegistry,
    type_name: TypeName,
    action: RequestAction,
    payload: Any = None,
) -> ApiError | None:
    """Chain all request checks. Returns first error or None."""
    error = check_type(registry, type_name)
    if error or action not in _WRITE_ACTIONS:
        return error
    return (
        check_envelope(payload)
        or check_identity(payload, action)
        or check_type_matches(payload, type_name)
    )
