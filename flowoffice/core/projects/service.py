from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from flowoffice.common.exceptions import BadRequestError, FlowOfficeException
from flowoffice.common.logging import get_logger
from flowoffice.config import settings
from flowoffice.core.boards.service import NO_STATUS_COLUMN, parse_board_id
from flowoffice.transport import endpoints
from flowoffice.transport.context import ExecutionContext
from flowoffice.transport.invoker import invoke_endpoint
from flowoffice.transport.schemas import (
    CreateProjectsInput,
    CreateProjectsOutput,
    GetProjectsInput,
    GetProjectsOutput,
    StatusFilter,
)

logger = get_logger("projects.service")

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    if size < 1:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


class OutputItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    json_: dict[str, Any] = Field(alias="json")
    paired_item: dict[str, int] | None = None
    error: str | None = None


class ProjectQuery(BaseModel):
    board_id: str | int | None = None
    subboard_id: str | int | None = None
    name: str = ""
    project_id: int | None = None
    project_ids_csv: str = ""
    project_uuid: str = ""
    project_uuids_csv: str = ""
    status_column_key: str = ""
    status_labels: list[str] = []
    skip: int | None = None


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def build_project_query(query: ProjectQuery) -> GetProjectsInput:
    project_ids: list[int] = []
    if query.project_id:
        project_ids.append(query.project_id)
    try:
        project_ids.extend(int(part) for part in _split_csv(query.project_ids_csv))
    except ValueError:
        raise BadRequestError(f"Invalid project id list: {query.project_ids_csv!r}")

    project_uuids = ([query.project_uuid] if query.project_uuid else []) + _split_csv(
        query.project_uuids_csv
    )

    status_column_key = query.status_column_key
    if status_column_key in ("", "-", NO_STATUS_COLUMN):
        status_column_key = ""

    status = None
    if status_column_key and query.status_labels:
        status = StatusFilter(
            status_column_key=status_column_key,
            filter_label_keys_or_names=query.status_labels,
        )

    if query.skip is not None and query.skip < 0:
        raise BadRequestError("skip must not be negative")

    return GetProjectsInput(
        board_id=parse_board_id(query.board_id),
        sub_board_id=parse_board_id(query.subboard_id),
        name=query.name or None,
        project_ids=project_ids or None,
        project_uuids=project_uuids or None,
        status=status,
        skip=query.skip or None,
    )


async def get_projects(
    context: ExecutionContext, query: ProjectQuery, *, continue_on_fail: bool = False
) -> list[OutputItem]:
    body = build_project_query(query)
    try:
        result = await invoke_endpoint(endpoints.GET_PROJECTS, context, body, lenient=True)
    except FlowOfficeException as e:
        if not continue_on_fail:
            raise
        filters = body.model_dump(mode="json", by_alias=True, exclude_none=True)
        return [OutputItem(json_={"error": e.detail, "filters": filters}, error=e.detail)]

    if isinstance(result, GetProjectsOutput):
        result = result.model_dump(mode="json", by_alias=True)
    return [OutputItem(json_=result if isinstance(result, dict) else {"response": result})]


async def create_projects(
    context: ExecutionContext,
    board_id: Any,
    subboard_id: Any,
    mappings: Sequence[Any],
    *,
    continue_on_fail: bool = False,
    batch_size: int | None = None,
) -> list[OutputItem]:
    """Create one project per mapped input item, in sequential batches.

    ``mappings[i]`` is the column-key-to-value mapping for input item ``i``;
    items without a mapping are skipped. Every output item is paired with the
    index of the input it came from.
    """
    board = parse_board_id(board_id)
    if board is None:
        raise BadRequestError("A board must be selected")
    subboard = parse_board_id(subboard_id)

    mapped_per_item = [
        (index, mapped) for index, mapped in enumerate(mappings) if isinstance(mapped, dict)
    ]
    size = batch_size or settings.PROJECT_BATCH_SIZE
    output: list[OutputItem] = []

    for batch in chunked(mapped_per_item, size):
        body = CreateProjectsInput(
            projects=[mapped for _, mapped in batch],
            board_id=board,
            sub_board_id=subboard,
        )
        try:
            result: CreateProjectsOutput = await invoke_endpoint(
                endpoints.CREATE_PROJECTS, context, body
            )
        except FlowOfficeException as e:
            if not continue_on_fail:
                raise
            logger.warning("Project batch of %d failed, continuing: %s", len(batch), e.detail)
            for index, mapped in batch:
                output.append(
                    OutputItem(
                        json_={"board_id": board, "subboard_id": subboard, "mapped": mapped},
                        paired_item={"item": index},
                        error=e.detail,
                    )
                )
            continue

        for position, (index, mapped) in enumerate(batch):
            created = result.created[position] if position < len(result.created) else None
            output.append(
                OutputItem(
                    json_={
                        "board_id": board,
                        "subboard_id": subboard,
                        "mapped": mapped,
                        "created": created,
                    },
                    paired_item={"item": index},
                )
            )

    logger.info("Created projects for %d input items on board %s", len(mapped_per_item), board)
    return output
