"""Error Model — tests for error values and the JSON:API error envelope."""

from hypermodel.core.errors import (
    ApiError, DatabaseError, ErrorKind, RelationshipNotDefinedError,
    ResourceNotFoundError, bad_request, not_found, not_implemented,
)


def test_error_kinds_map_to_status_codes():
    assert not_found("x").http_status == 404
    assert bad_request("x").http_status == 400
    assert not_implemented("x").http_status == 501
    assert ApiError(ErrorKind.INTERNAL, "x").http_status == 500


def test_to_response_renders_errors_array():
    assert bad_request("Missing data").to_response() == {
        "errors": [{"status": "400", "title": "Bad Request", "detail": "Missing data"}],
    }


def test_custom_title_and_meta_are_rendered():
    bare = ApiError(ErrorKind.INTERNAL, "boom", title="RuntimeError")
    with_meta = ApiError(ErrorKind.INTERNAL, "boom", title="RuntimeError", meta={"stack": ["a"]})
    assert bare.to_error_object()["title"] == "RuntimeError"
    assert "meta" not in bare.to_error_object()
    assert with_meta.to_error_object()["meta"] == {"stack": ["a"]}


def test_raised_errors_convert_to_values():
    assert ResourceNotFoundError("widgets").to_api_error().kind is ErrorKind.NOT_FOUND
    assert RelationshipNotDefinedError("org", "tags").http_status == 500
    db_error = DatabaseError("timeout", "execute")
    assert db_error.code == "DATABASE_ERROR"
    assert db_error.to_response()["errors"][0]["status"] == "500"
