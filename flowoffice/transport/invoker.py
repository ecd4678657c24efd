from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError

from flowoffice.common.exceptions import ContractViolation
from flowoffice.common.logging import get_logger
from flowoffice.transport.context import ExecutionContext, resolve_base_url
from flowoffice.transport.endpoints import Endpoint

logger = get_logger("transport.invoker")


def _encode_body(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return body


async def invoke_endpoint(
    endpoint: Endpoint,
    context: ExecutionContext,
    body: Any | None = None,
    *,
    lenient: bool = False,
) -> Any:
    """Call one FlowOffice endpoint and validate the response.

    With ``lenient`` set, a response that does not match the endpoint's
    response model is returned raw instead of raising ``ContractViolation``.
    Transport failures always propagate.
    """
    base_url = await resolve_base_url(context)
    response = await context.request_with_authentication(
        endpoint.method,
        base_url + endpoint.pathname,
        _encode_body(body) if body is not None else None,
    )

    try:
        return endpoint.response_model.model_validate(response)
    except ValidationError as e:
        if lenient:
            logger.warning(
                "%s %s returned an unexpected shape (%d errors), passing it through",
                endpoint.method,
                endpoint.pathname,
                e.error_count(),
            )
            return response
        raise ContractViolation(endpoint.pathname, e.errors(include_url=False)) from e
