"""FastAPI web application for taskboard.

Serves the optimistic task list to a presentation layer: the overlay with
per-task assignment and pending state, plus the toggle and delete actions.
"""

from typing import Dict, List, Optional
from fastapi import Depends, FastAPI, HTTPException, status
from pydantic import BaseModel, Field

from taskboard import __version__
from taskboard.auth.context import AuthContext
from taskboard.auth.dependencies import get_auth_context
from taskboard.engine.assignment import HeaderAssignment
from taskboard.engine.reconciler import ToggleOutcome
from taskboard.engine.session import TaskListSession
from taskboard.integrations.gateway import AsyncTaskGateway
from taskboard.integrations.task_api import TaskApiClient
from taskboard.models.group import GroupMember
from taskboard.models.task import Task
from taskboard.models.user import Actor

# Initialize FastAPI app
app = FastAPI(
    title="taskboard API",
    description="Optimistic task list with roadmap reconciliation",
    version=__version__,
)

# In-memory sessions, one per actor
sessions_store: Dict[str, TaskListSession] = {}


class HeaderView(BaseModel):
    """Resolved group sub-assignment."""
    title: str
    assignee: str
    assignment: HeaderAssignment


class TaskView(BaseModel):
    """Overlay task plus derived display state."""
    task: Task
    assigned_to_me: bool
    pending_items: List[int] = Field(default_factory=list, description="Roadmap positions with an update in flight")
    headers: List[HeaderView] = Field(default_factory=list)


class TaskListResponse(BaseModel):
    tasks: List[TaskView]
    pending_count: int


class ToggleRequest(BaseModel):
    """Roadmap toggle request carrying the currently displayed value."""
    completed: bool


class ToggleResponse(BaseModel):
    outcome: ToggleOutcome
    task: Optional[Task] = None
    pending_count: int


class DeleteResponse(BaseModel):
    deleted: bool


async def get_session(context: AuthContext = Depends(get_auth_context)) -> TaskListSession:
    """Get (or create and load) the session for the authenticated actor.

    A session is only kept once its initial load succeeded, so a failed first
    fetch is retried on the next request.
    """
    session = sessions_store.get(context.actor_id)
    if session is None:
        gateway = AsyncTaskGateway(TaskApiClient(api_token=context.token))
        session = TaskListSession(gateway, actor_id=context.actor_id)
        await session.load_group_members()
        if await session.refresh():
            sessions_store[context.actor_id] = session
    return session


def _task_view(session: TaskListSession, task: Task) -> TaskView:
    headers = []
    if task.is_group_task and task.task_headers:
        headers = [
            HeaderView(
                title=header.title,
                assignee=session.assignee_name(header),
                assignment=session.header_assignment(header),
            )
            for header in task.task_headers
        ]
    return TaskView(
        task=task,
        assigned_to_me=session.is_assigned_to_me(task),
        pending_items=session.pending_positions(task.id),
        headers=headers,
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/tasks", response_model=TaskListResponse)
async def list_tasks(session: TaskListSession = Depends(get_session)):
    """Current overlay with assignment and pending state."""
    return TaskListResponse(
        tasks=[_task_view(session, task) for task in session.tasks],
        pending_count=session.pending_count,
    )


@app.post("/tasks/refresh", response_model=TaskListResponse)
async def refresh_tasks(session: TaskListSession = Depends(get_session)):
    """Reload the snapshot from the task service."""
    if not await session.refresh():
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch tasks")
    return await list_tasks(session)


@app.patch("/tasks/{task_id}/roadmap/{item_index}", response_model=ToggleResponse)
async def toggle_roadmap_item(
    task_id: str,
    item_index: int,
    request: ToggleRequest,
    session: TaskListSession = Depends(get_session),
):
    """Toggle a roadmap item; `completed` is the value currently displayed."""
    outcome = await session.toggle_roadmap_item(task_id, item_index, request.completed)
    if outcome == ToggleOutcome.INVALID:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Roadmap item {item_index} of task {task_id} not found",
        )
    return ToggleResponse(
        outcome=outcome,
        task=session.overlay.get(task_id),
        pending_count=session.pending_count,
    )


@app.delete("/tasks/{task_id}", response_model=DeleteResponse)
async def delete_task(task_id: str, session: TaskListSession = Depends(get_session)):
    """Delete a task; it stays listed unless the task service confirms."""
    if not await session.delete_task(task_id):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to delete task {task_id}")
    return DeleteResponse(deleted=True)


@app.get("/group/members", response_model=List[GroupMember])
async def list_group_members(session: TaskListSession = Depends(get_session)):
    """Members used to resolve sub-assignment names."""
    return list(session.members)


@app.get("/me", response_model=Actor)
async def current_actor(context: AuthContext = Depends(get_auth_context)):
    """The actor identified by the bearer token."""
    return context.actor
