"""Response Rendering — turns orchestrator outcomes into HTTP responses.

Invariants:
    - Errors always render as `{"errors": [...]}` with the error's status code
    - An outcome without a document renders as an empty 204
"""

from fastapi import Response
from fastapi.responses import JSONResponse

from hypermodel.core.errors import ApiError
from hypermodel.services.resource_orchestrator import ResourceOutcome

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class JsonApiResponse(JSONResponse):
    media_type = JSONAPI_MEDIA_TYPE


def render_error(error: ApiError) -> JsonApiResponse:
    return JsonApiResponse(
        status_code=error.http_status, content=error.to_response(),
    )


def render_outcome(outcome: ResourceOutcome) -> Response:
    if outcome.error:
        return render_error(outcome.error)
    if outcome.document is None:
        return Response(status_code=outcome.status_code)
    return JsonApiResponse(
        status_code=outcome.status_code, content=outcome.document,
    )
