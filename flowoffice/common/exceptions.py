from typing import Any

from fastapi import HTTPException, status


class FlowOfficeException(HTTPException):
    def __init__(self, detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(status_code=status_code, detail=detail)


class NotFoundError(FlowOfficeException):
    def __init__(self, resource: str, resource_id: str | None = None):
        detail = f"{resource} not found"
        if resource_id:
            detail = f"{resource} '{resource_id}' not found"
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND)


class BadRequestError(FlowOfficeException):
    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)


class ExternalServiceError(FlowOfficeException):
    def __init__(self, service: str, detail: str | None = None):
        msg = f"External service error: {service}"
        if detail:
            msg += f" - {detail}"
        super().__init__(detail=msg, status_code=status.HTTP_502_BAD_GATEWAY)


class TransportError(ExternalServiceError):
    """The authenticated call itself failed (network, auth or HTTP status)."""

    def __init__(self, detail: str, upstream_status: int | None = None):
        super().__init__("flowoffice", detail)
        self.upstream_status = upstream_status


class ContractViolation(ExternalServiceError):
    """The response did not match the endpoint's declared output contract."""

    def __init__(self, pathname: str, errors: list[dict[str, Any]]):
        super().__init__("flowoffice", f"unexpected response shape from {pathname}")
        self.pathname = pathname
        self.errors = errors


class MalformedColumnConfig(FlowOfficeException):
    def __init__(self, column_key: str, reason: str):
        super().__init__(
            detail=f"Column '{column_key}' has an undecodable status configuration: {reason}",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
        self.column_key = column_key
