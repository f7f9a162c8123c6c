"""Task service"""

import math
from datetime import timedelta
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from tasknest.core.database import utcnow
from tasknest.core.errors import BadRequestError
from tasknest.models.task import Task, STATUS_COMPLETED

SORT_FIELDS = {
    "createdAt": Task.created_at,
    "updatedAt": Task.updated_at,
    "dueDate": Task.due_date,
    "priority": Task.priority,
    "status": Task.status,
    "title": Task.title,
}


def base_task_query(db: Session, user_id: int, team_id: Optional[int] = None,
                    scope_filter: Optional[str] = None) -> Query:
    # perso : ses tâches hors équipe
    if team_id is None:
        return db.query(Task).filter(
            Task.user_id == user_id,
            Task.team_id.is_(None)
        )

    # équipe : toutes les tâches de l'équipe, éventuellement "assigned" / "created"
    query = db.query(Task).filter(Task.team_id == team_id)
    if scope_filter == "assigned":
        query = query.filter(Task.assigned_to == user_id)
    elif scope_filter == "created":
        query = query.filter(Task.user_id == user_id)
    return query


def stats_task_query(db: Session, user_id: int, team_id: Optional[int] = None) -> Query:
    # stats perso : toutes les tâches créées par l'user, équipes comprises
    if team_id is None:
        return db.query(Task).filter(Task.user_id == user_id)
    return base_task_query(db, user_id, team_id)


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_task_filters(query: Query, status: str = None, priority: str = None,
                       category: str = None, search: str = None) -> Query:
    if status:
        query = query.filter(Task.status == status)
    if priority:
        query = query.filter(Task.priority == priority)
    if category:
        query = query.filter(Task.category == category)
    if search:
        # % et _ cherchés littéralement
        pattern = f"%{escape_like(search)}%"
        query = query.filter(or_(
            Task.title.ilike(pattern, escape="\\"),
            Task.description.ilike(pattern, escape="\\"),
            Task.category.ilike(pattern, escape="\\")
        ))
    return query


def apply_sort(query: Query, sort: str = "-createdAt") -> Query:
    descending = sort.startswith("-")
    column = SORT_FIELDS.get(sort[1:] if descending else sort)
    if column is None:
        raise BadRequestError(f"Invalid sort field: {sort}")
    order = column.desc() if descending else column.asc()
    return query.order_by(order, Task.id.desc() if descending else Task.id.asc())


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Task], int, int]:
    total = query.count()
    tasks = query.offset((page - 1) * limit).limit(limit).all()
    pages = math.ceil(total / limit) if limit else 0
    return tasks, total, pages


def get_overdue_tasks(query: Query) -> List[Task]:
    return query.filter(
        Task.due_date.isnot(None),
        Task.due_date < utcnow(),
        Task.status != STATUS_COMPLETED
    ).all()


def get_due_this_week(query: Query) -> List[Task]:
    now = utcnow()
    week_end = now + timedelta(days=7)
    return query.filter(
        Task.due_date >= now,
        Task.due_date <= week_end,
        Task.status != STATUS_COMPLETED
    ).all()


def compute_task_stats(query: Query) -> dict:
    tasks = query.all()
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == STATUS_COMPLETED)

    by_category = {}
    for task in tasks:
        category = task.category or "General"
        by_category[category] = by_category.get(category, 0) + 1

    return {
        "total": total,
        "pending": sum(1 for t in tasks if t.status == "Pending"),
        "inProgress": sum(1 for t in tasks if t.status == "In Progress"),
        "completed": completed,
        "overdue": len(get_overdue_tasks(query)),
        "byPriority": {
            "high": sum(1 for t in tasks if t.priority == "High"),
            "medium": sum(1 for t in tasks if t.priority == "Medium"),
            "low": sum(1 for t in tasks if t.priority == "Low"),
        },
        "byCategory": by_category,
        "completionRate": round(completed / total * 100, 1) if total else 0,
        "dueThisWeek": len(get_due_this_week(query)),
    }
