"""API handlers for task endpoints."""

import logging
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from taskboard.auth.dependencies import get_current_principal
from taskboard.auth.models import Principal
from taskboard.features.tasks.exceptions import TaskNotFoundError, TaskValidationError
from taskboard.features.tasks.schemas import (
    TaskCreateRequest,
    TaskDeleteResponse,
    TaskPatch,
    TaskResponse,
    TaskUpdateRequest,
)
from taskboard.features.tasks.service import TaskService, get_task_service
from taskboard.services.rate_limiter import default_rate_limit, write_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

BodyT = TypeVar("BodyT", bound=BaseModel)


async def _parse_body(request: Request, model: type[BodyT]) -> BodyT:
    """
    Read and validate the JSON body.

    Called from the handler body, after the principal dependency, so a
    request without a valid session is answered 401 before its body is read.
    Failures surface as ``RequestValidationError`` and become a 400.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise RequestValidationError(
            [{"type": "json_invalid", "loc": ("body",), "msg": f"Invalid JSON: {e}"}]
        ) from e

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in errors]
        ) from e


@router.get("", response_model=list[TaskResponse])
@default_rate_limit
async def list_tasks(
    request: Request,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> list[TaskResponse]:
    """
    List every task, newest first.

    Raises:
        HTTPException: 401 if not authenticated
        HTTPException: 500 if database error occurs
    """
    try:
        return [TaskResponse.from_task(task) for task in service.list_tasks(principal)]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching tasks: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tasks",
        ) from e


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
@write_rate_limit
async def create_task(
    request: Request,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """
    Create a task.

    ``title`` and ``description`` are required and must be non-empty;
    ``completed`` defaults to false.

    Raises:
        HTTPException: 400 if title or description is missing
        HTTPException: 401 if not authenticated
        HTTPException: 500 if database error occurs

    Example Response:
        {
            "id": "0b6f2f7e-8a0e-4c55-9a7f-1f1d1c2b3a4d",
            "title": "Buy milk",
            "description": "2%",
            "completed": false,
            "createdAt": "2025-01-01T12:00:00Z"
        }
    """
    payload = await _parse_body(request, TaskCreateRequest)

    try:
        return TaskResponse.from_task(service.create_task(principal, payload))

    except HTTPException:
        raise
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Error creating task: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create task",
        ) from e


@router.patch("/{task_id}", response_model=TaskResponse)
@write_rate_limit
async def update_task(
    request: Request,
    task_id: str,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskResponse:
    """
    Partially update a task; only the fields present in the body are written.

    Raises:
        HTTPException: 401 if not authenticated
        HTTPException: 404 if the task does not exist
        HTTPException: 500 if database error occurs
    """
    payload = await _parse_body(request, TaskUpdateRequest)

    try:
        task = service.update_task(principal, task_id, TaskPatch.from_request(payload))
        return TaskResponse.from_task(task)

    except HTTPException:
        raise
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found") from e
    except Exception as e:
        logger.error(f"Error updating task {task_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update task",
        ) from e


@router.delete("/{task_id}", response_model=TaskDeleteResponse)
@write_rate_limit
async def delete_task(
    request: Request,
    task_id: str,
    principal: Principal = Depends(get_current_principal),
    service: TaskService = Depends(get_task_service),
) -> TaskDeleteResponse:
    """
    Delete a task.

    Raises:
        HTTPException: 401 if not authenticated
        HTTPException: 404 if the task does not exist
        HTTPException: 500 if database error occurs
    """
    try:
        service.delete_task(principal, task_id)
        return TaskDeleteResponse()

    except HTTPException:
        raise
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found") from e
    except Exception as e:
        logger.error(f"Error deleting task {task_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete task",
        ) from e
