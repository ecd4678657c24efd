from __future__ import annotations

from dataclasses import dataclass, replace
from urllib.parse import quote

from pydantic import BaseModel

from flowoffice.transport import schemas

API_PREFIX = "/api/v1"
SUBSCRIPTION_PATH = f"{API_PREFIX}/webhooks/subscriptions/project-status-changed/{{client_subscription_id}}"


@dataclass(frozen=True)
class Endpoint:
    method: str
    pathname: str
    response_model: type[BaseModel]
    request_model: type[BaseModel] | None = None

    def format(self, **params: str) -> Endpoint:
        """Return a copy with URL-quoted path parameters filled in."""
        quoted = {key: quote(str(value), safe="") for key, value in params.items()}
        return replace(self, pathname=self.pathname.format(**quoted))


LIST_BOARDS = Endpoint("GET", f"{API_PREFIX}/board/list-boards", schemas.BoardTree)

CREATE_PROJECTS = Endpoint(
    "POST",
    f"{API_PREFIX}/project/create-projects",
    schemas.CreateProjectsOutput,
    schemas.CreateProjectsInput,
)

GET_PROJECTS = Endpoint(
    "POST",
    f"{API_PREFIX}/project/get-projects",
    schemas.GetProjectsOutput,
    schemas.GetProjectsInput,
)

UPSERT_SUBSCRIPTION = Endpoint(
    "PUT", SUBSCRIPTION_PATH, schemas.SubscriptionOutput, schemas.SubscriptionUpsertInput
)
GET_SUBSCRIPTION = Endpoint("GET", SUBSCRIPTION_PATH, schemas.SubscriptionOutput)
DELETE_SUBSCRIPTION = Endpoint("DELETE", SUBSCRIPTION_PATH, schemas.SubscriptionDeleteOutput)

VALIDATE_API_KEY = Endpoint("GET", f"{API_PREFIX}/api-key/validate", schemas.ApiKeyValidation)
