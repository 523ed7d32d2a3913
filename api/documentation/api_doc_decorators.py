"""
API Documentation Decorators

This module contains decorators for documenting API endpoints
using drf-yasg (Yet Another Swagger Generator).
"""

from typing import Any, Dict, List

from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status

TYPE_MAP = {
    "string": openapi.TYPE_STRING,
    "integer": openapi.TYPE_INTEGER,
    "number": openapi.TYPE_NUMBER,
    "boolean": openapi.TYPE_BOOLEAN,
}


def _query_parameters(query_params: List[Dict]) -> List[openapi.Parameter]:
    """Build openapi query parameters, dropping duplicates by name."""
    seen = set()
    parameters = []
    for param in query_params or []:
        if param["name"] in seen:
            continue
        seen.add(param["name"])
        parameters.append(
            openapi.Parameter(
                param["name"],
                openapi.IN_QUERY,
                description=param.get("description", ""),
                type=TYPE_MAP.get(param.get("type", "string"), openapi.TYPE_STRING),
                format=param.get("format"),
                required=param.get("required", False),
            )
        )
    return parameters


def document_api_endpoint(
    summary: str = None,
    description: str = None,
    request_body: Any = None,
    responses: Dict = None,
    tags: List[str] = None,
    query_params: List[Dict] = None,
    operation_id: str = None,
):
    """
    Decorator for documenting API endpoints.

    Args:
        summary: Short summary of what the operation does
        description: Verbose explanation of the operation behavior
        request_body: Request body serializer or schema
        responses: Response descriptions keyed by HTTP status code
        tags: A list of tags for API documentation control
        query_params: List of query parameters with name, description, required, and type
        operation_id: Unique string used to identify the operation

    Returns:
        Decorated function with Swagger documentation
    """
    if responses is None:
        responses = {
            status.HTTP_200_OK: "Success",
            status.HTTP_400_BAD_REQUEST: "Bad Request",
            status.HTTP_403_FORBIDDEN: "Missing tenant",
            status.HTTP_404_NOT_FOUND: "Not Found",
        }

    manual_parameters = _query_parameters(query_params)

    def decorator(view_func):
        return swagger_auto_schema(
            operation_summary=summary,
            operation_description=description,
            request_body=request_body,
            responses=responses,
            tags=tags,
            manual_parameters=manual_parameters or None,
            operation_id=operation_id,
        )(view_func)

    return decorator
