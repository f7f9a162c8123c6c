import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tasknest.core.database import get_db
from tasknest.core.errors import BadRequestError, ForbiddenError, NotFoundError
from tasknest.core.security import get_current_user
from tasknest.models.task import Task
from tasknest.models.user import User
from tasknest.schemas.task import TaskCreate, TaskUpdate, TaskResponse, Priority, Status
from tasknest.services.permissions import (
    can_assign,
    can_delete_task,
    can_update_task,
    can_view_task,
    is_member
)
from tasknest.services.task_service import (
    apply_sort,
    apply_task_filters,
    base_task_query,
    compute_task_stats,
    stats_task_query,
    paginate
)
from tasknest.services.team_service import get_team_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])

# champs qui ne peuvent pas être remis à null via un update
REQUIRED_FIELDS = ("title", "category", "priority", "status")


def _get_task(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def _check_assignee(team, owner_id: int, assignee_id: Optional[int]):
    if not can_assign(team, owner_id, assignee_id):
        if team is None:
            raise BadRequestError("Personal tasks can only be assigned to their owner")
        raise BadRequestError("Assignee must be a member of the team")


def _task_out(task: Task) -> TaskResponse:
    return TaskResponse.model_validate(task)


@router.get("")
def list_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    status_filter: Optional[Status] = Query(None, alias="status"),
    priority: Optional[Priority] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    sort: str = Query("-createdAt"),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=100),
    team_id: Optional[int] = Query(None, alias="teamId"),
    scope_filter: Optional[Literal["assigned", "created"]] = Query(None, alias="filter")
):
    """
    Liste paginée des tâches.

    - sans teamId : tâches perso de l'user (jamais les tâches d'équipe)
    - avec teamId : tâches de l'équipe, réservé aux membres ;
      filter=assigned / filter=created pour restreindre
    """
    if team_id is not None:
        team = get_team_or_404(db, team_id)
        if not is_member(team, current_user.id):
            raise ForbiddenError("Not authorized to view tasks of this team")

    query = base_task_query(db, current_user.id, team_id, scope_filter)
    query = apply_task_filters(query, status_filter, priority, category, search)
    query = apply_sort(query, sort)
    tasks, total, pages = paginate(query, page, limit)

    return {
        "success": True,
        "count": len(tasks),
        "total": total,
        "page": page,
        "pages": pages,
        "data": {"tasks": [_task_out(t) for t in tasks]}
    }


@router.get("/stats")
def task_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    team_id: Optional[int] = Query(None, alias="teamId")
):
    if team_id is not None:
        team = get_team_or_404(db, team_id)
        if not is_member(team, current_user.id):
            raise ForbiddenError("Not authorized to view tasks of this team")

    stats = compute_task_stats(stats_task_query(db, current_user.id, team_id))
    return {"success": True, "data": {"stats": stats}}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    team = None
    if task_data.team_id is not None:
        team = get_team_or_404(db, task_data.team_id)
        if not is_member(team, current_user.id):
            raise ForbiddenError("Not authorized to create tasks in this team")
    _check_assignee(team, current_user.id, task_data.assigned_to)

    new_task = Task(
        user_id=current_user.id,
        team_id=task_data.team_id,
        assigned_to=task_data.assigned_to,
        title=task_data.title,
        description=task_data.description or "",
        category=task_data.category or "General",
        priority=task_data.priority,
        status=task_data.status,
        due_date=task_data.due_date
    )
    db.add(new_task)
    db.commit()
    db.refresh(new_task)
    logger.info(f"Task {new_task.id} created by user {current_user.id}")

    return {
        "success": True,
        "message": "Task created successfully",
        "data": {"task": _task_out(new_task)}
    }


@router.get("/{task_id}")
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = _get_task(db, task_id)
    if not can_view_task(task, current_user.id, task.team):
        raise ForbiddenError("Not authorized to access this task")

    return {"success": True, "data": {"task": _task_out(task)}}


@router.put("/{task_id}")
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = _get_task(db, task_id)
    if not can_update_task(task, current_user.id, task.team):
        raise ForbiddenError("Not authorized to update this task")

    update_data = task_data.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in update_data and update_data[field] is None:
            del update_data[field]

    if "assigned_to" in update_data:
        _check_assignee(task.team, task.user_id, update_data["assigned_to"])

    # status passe par le validateur du modèle -> completed_at synchronisé
    for field, value in update_data.items():
        setattr(task, field, value)

    db.commit()
    db.refresh(task)

    return {
        "success": True,
        "message": "Task updated successfully",
        "data": {"task": _task_out(task)}
    }


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = _get_task(db, task_id)
    if not can_delete_task(task, current_user.id, task.team):
        if task.team_id is not None and can_view_task(task, current_user.id, task.team):
            raise ForbiddenError("Only the task creator can delete this task")
        raise ForbiddenError("Not authorized to delete this task")

    db.delete(task)
    db.commit()
    logger.info(f"Task {task_id} deleted by user {current_user.id}")

    return {"success": True, "message": "Task deleted successfully", "data": {}}
