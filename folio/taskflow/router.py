# folio/taskflow/router.py
import asyncio
import contextlib
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from folio.auth import TaskFlowUser, resolve_user, resolve_websocket_user
from folio.taskflow.models import (
    SubTaskCreate,
    Task,
    TaskCreate,
    TaskFilters,
    TaskProject,
    TaskProjectCreate,
    TaskProjectUpdate,
    TaskStatus,
    TaskUpdate,
)
from folio.taskflow.service import ProjectNotFound, TaskNotFound, TaskProjectService, TaskService
from folio.taskflow.sync import channel_for

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/taskflow", tags=["taskflow"])


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_project_service(request: Request) -> TaskProjectService:
    return request.app.state.project_service


def _invalid(e: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=json.loads(e.json()))


# --- Tasks ---
@router.get("/tasks", response_model=List[Task])
async def list_tasks(
    status: Optional[TaskStatus] = Query(None),
    is_important: Optional[bool] = Query(None),
    is_my_day: Optional[bool] = Query(None),
    project_id: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    user: TaskFlowUser = Depends(resolve_user),
    tasks: TaskService = Depends(get_task_service),
):
    """필터 조건에 맞는 작업 목록을 정렬하여 반환합니다."""
    filters = TaskFilters(
        status=status,
        is_important=is_important,
        is_my_day=is_my_day,
        project_id=project_id,
        search_query=search,
    )
    return tasks.get_filtered_tasks(user.id, filters)


@router.post("/tasks", response_model=Task, status_code=201)
async def create_task(
    payload: TaskCreate,
    user: TaskFlowUser = Depends(resolve_user),
    tasks: TaskService = Depends(get_task_service),
):
    return await tasks.create_task(user.id, payload)


@router.get("/tasks/{task_id}", response_model=Task)
async def get_task(task_id: str, user: TaskFlowUser = Depends(resolve_user), tasks: TaskService = Depends(get_task_service)):
    try:
        return tasks.get_task(user.id, task_id)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Task not found'})


@router.patch("/tasks/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    user: TaskFlowUser = Depends(resolve_user),
    tasks: TaskService = Depends(get_task_service),
):
    try:
        return await tasks.update_task(user.id, task_id, payload)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Task not found'})
    except ValidationError as e:
        raise _invalid(e)


@router.delete("/tasks/{task_id}", status_code=204)
async def delete_task(task_id: str, user: TaskFlowUser = Depends(resolve_user), tasks: TaskService = Depends(get_task_service)):
    try:
        await tasks.delete_task(user.id, task_id)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Task not found'})
    return Response(status_code=204)


async def _toggle(action, user_id: str, task_id: str) -> Task:
    try:
        return await action(user_id, task_id)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Task not found'})


@router.post("/tasks/{task_id}/toggle-complete", response_model=Task)
async def toggle_complete(task_id: str, user: TaskFlowUser = Depends(resolve_user), tasks: TaskService = Depends(get_task_service)):
    """완료 상태를 토글합니다 (completed <-> pending)."""
    return await _toggle(tasks.toggle_complete, user.id, task_id)


@router.post("/tasks/{task_id}/toggle-important", response_model=Task)
async def toggle_important(task_id: str, user: TaskFlowUser = Depends(resolve_user), tasks: TaskService = Depends(get_task_service)):
    return await _toggle(tasks.toggle_important, user.id, task_id)


@router.post("/tasks/{task_id}/toggle-my-day", response_model=Task)
async def toggle_my_day(task_id: str, user: TaskFlowUser = Depends(resolve_user), tasks: TaskService = Depends(get_task_service)):
    return await _toggle(tasks.toggle_my_day, user.id, task_id)


# --- Sub-tasks ---
@router.post("/tasks/{task_id}/subtasks", response_model=Task, status_code=201)
async def add_sub_task(
    task_id: str,
    payload: SubTaskCreate,
    user: TaskFlowUser = Depends(resolve_user),
    tasks: TaskService = Depends(get_task_service),
):
    try:
        return await tasks.add_sub_task(user.id, task_id, payload.title)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Task not found'})


@router.post("/tasks/{task_id}/subtasks/{sub_task_id}/toggle", response_model=Task)
async def toggle_sub_task(
    task_id: str,
    sub_task_id: str,
    user: TaskFlowUser = Depends(resolve_user),
    tasks: TaskService = Depends(get_task_service),
):
    try:
        return await tasks.toggle_sub_task(user.id, task_id, sub_task_id)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Task or sub-task not found'})


@router.delete("/tasks/{task_id}/subtasks/{sub_task_id}", response_model=Task)
async def delete_sub_task(
    task_id: str,
    sub_task_id: str,
    user: TaskFlowUser = Depends(resolve_user),
    tasks: TaskService = Depends(get_task_service),
):
    try:
        return await tasks.delete_sub_task(user.id, task_id, sub_task_id)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Task or sub-task not found'})


# --- Projects ---
@router.get("/projects")
async def list_projects(
    user: TaskFlowUser = Depends(resolve_user),
    projects: TaskProjectService = Depends(get_project_service),
):
    """프로젝트 목록과 각 프로젝트의 작업 수를 반환합니다."""
    return [
        {**project.model_dump(mode='json'), 'task_count': projects.get_project_task_count(user.id, project.id)}
        for project in projects.get_projects(user.id)
    ]


@router.post("/projects", response_model=TaskProject, status_code=201)
async def create_project(
    payload: TaskProjectCreate,
    user: TaskFlowUser = Depends(resolve_user),
    projects: TaskProjectService = Depends(get_project_service),
):
    return await projects.create_project(user.id, payload)


@router.patch("/projects/{project_id}", response_model=TaskProject)
async def update_project(
    project_id: str,
    payload: TaskProjectUpdate,
    user: TaskFlowUser = Depends(resolve_user),
    projects: TaskProjectService = Depends(get_project_service),
):
    try:
        return await projects.update_project(user.id, project_id, payload)
    except ProjectNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Project not found'})
    except ValidationError as e:
        raise _invalid(e)


@router.delete("/projects/{project_id}", status_code=204)
async def delete_project(
    project_id: str,
    user: TaskFlowUser = Depends(resolve_user),
    projects: TaskProjectService = Depends(get_project_service),
):
    """프로젝트와 소속 작업을 함께 삭제합니다."""
    try:
        await projects.delete_project(user.id, project_id)
    except ProjectNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Project not found'})
    return Response(status_code=204)


@router.get("/projects/{project_id}/tasks", response_model=List[Task])
async def list_project_tasks(
    project_id: str,
    user: TaskFlowUser = Depends(resolve_user),
    projects: TaskProjectService = Depends(get_project_service),
):
    try:
        return projects.get_project_tasks(user.id, project_id)
    except ProjectNotFound:
        raise HTTPException(status_code=404, detail={'error': 'Project not found'})


# --- Realtime sync ---
async def _forward(websocket: WebSocket, subscription) -> None:
    async for event in subscription:
        await websocket.send_json(event.model_dump(mode='json'))


async def _drain(websocket: WebSocket) -> None:
    # Incoming messages are ignored; receiving is how a disconnect is noticed
    while True:
        await websocket.receive_text()


@router.websocket("/sync")
async def sync_stream(websocket: WebSocket):
    """사용자 채널을 구독하고 변경 이벤트를 스트리밍합니다."""
    try:
        user = await resolve_websocket_user(websocket)
    except HTTPException as e:
        await websocket.close(code=1008, reason=str(e.detail))
        return

    broker = websocket.app.state.broker
    channel = channel_for(user.id)
    await websocket.accept()
    async with broker.subscribe(channel) as subscription:
        await websocket.send_json({"type": "subscribed", "channel": channel, "user_id": user.id})
        logger.info(f"Sync subscriber connected on {channel}")
        forward = asyncio.create_task(_forward(websocket, subscription))
        receive = asyncio.create_task(_drain(websocket))
        done, pending = await asyncio.wait({forward, receive}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect):
                await task

        error = forward.exception() if forward in done else None
        if forward in done and not isinstance(error, WebSocketDisconnect):
            logger.error(f"Sync stream on {channel} stopped: {error!r}", exc_info=error)
            # The client may already be gone
            with contextlib.suppress(RuntimeError):
                await websocket.close(code=1011, reason="Sync stream unavailable")
        else:
            if receive in done:
                receive.exception()
            logger.info(f"Sync subscriber disconnected from {channel}")
