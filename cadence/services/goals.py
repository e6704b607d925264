"""
Goal list: create, edit, toggle, delete and drag-reorder. Owner scoped.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from cadence.core.errors import NotFoundError, ValidationError
from cadence.models.goal import Goal


def list_goals(db: Session, owner_id: str) -> list[Goal]:
    return (
        db.query(Goal)
        .filter(Goal.user_id == owner_id)
        .order_by(
            Goal.sort_order.is_(None),
            Goal.sort_order.asc(),
            Goal.created_at.desc(),
            Goal.id.desc(),
        )
        .all()
    )


def _get_goal(db: Session, owner_id: str, goal_id: int) -> Goal:
    goal = db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == owner_id).first()
    if goal is None:
        raise NotFoundError("Goal", goal_id)
    return goal


def create_goal(db: Session, owner_id: str, text: str) -> Goal:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Missing text.", field="text")

    current_max = (
        db.query(func.max(Goal.sort_order))
        .filter(Goal.user_id == owner_id)
        .scalar()
    )
    goal = Goal(
        user_id=owner_id,
        text=text,
        is_done=False,
        sort_order=(current_max if current_max is not None else -1) + 1,
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


def update_goal(
    db: Session,
    owner_id: str,
    goal_id: int,
    text: Optional[str] = None,
    is_done: Optional[bool] = None,
    sort_order: Optional[int] = None,
) -> Goal:
    goal = _get_goal(db, owner_id, goal_id)
    if text is not None:
        text = text.strip()
        if not text:
            raise ValidationError("Text cannot be empty.", field="text")
        goal.text = text
    if is_done is not None:
        goal.is_done = is_done
    if sort_order is not None:
        goal.sort_order = sort_order
    db.commit()
    db.refresh(goal)
    return goal


def delete_goal(db: Session, owner_id: str, goal_id: int) -> None:
    goal = _get_goal(db, owner_id, goal_id)
    db.delete(goal)
    db.commit()


def reorder_goals(db: Session, owner_id: str, ids: list[int]) -> list[Goal]:
    """Give each listed goal its position as sort_order. Unlisted goals keep theirs."""
    if len(set(ids)) != len(ids):
        raise ValidationError("Duplicate goal ids in reorder.", field="ids")
    goals = {
        g.id: g
        for g in db.query(Goal).filter(Goal.user_id == owner_id, Goal.id.in_(ids)).all()
    }
    for goal_id in ids:
        if goal_id not in goals:
            raise NotFoundError("Goal", goal_id)
    for position, goal_id in enumerate(ids):
        goals[goal_id].sort_order = position
    db.commit()
    return list_goals(db, owner_id)


def goal_dict(g: Goal) -> dict:
    return {
        "id": g.id,
        "text": g.text,
        "is_done": bool(g.is_done),
        "sort_order": g.sort_order,
        "created_at": g.created_at.isoformat() if g.created_at else None,
    }
