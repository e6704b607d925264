"""
Goals router.

GET    /goals
POST   /goals
POST   /goals/reorder
PATCH  /goals/{goal_id}
DELETE /goals/{goal_id}
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from cadence.core.auth import get_owner_id, require_authorized
from cadence.db.base import get_db
from cadence.schemas.common import OkResponse
from cadence.schemas.goal import GoalCreate, GoalListResponse, GoalOut, GoalReorder, GoalUpdate
from cadence.services import goals as goal_service

router = APIRouter(prefix="/goals", tags=["goals"], dependencies=[Depends(require_authorized)])


@router.get("", response_model=GoalListResponse, summary="Goals in display order")
def list_goals(db: Session = Depends(get_db), owner_id: str = Depends(get_owner_id)):
    goals = goal_service.list_goals(db, owner_id)
    return GoalListResponse(goals=[GoalOut(**goal_service.goal_dict(g)) for g in goals])


@router.post(
    "",
    response_model=GoalOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add a goal at the bottom of the list",
)
def create_goal(
    payload: GoalCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    goal = goal_service.create_goal(db, owner_id, payload.text)
    return GoalOut(**goal_service.goal_dict(goal))


@router.post("/reorder", response_model=GoalListResponse, summary="Set the display order")
def reorder_goals(
    payload: GoalReorder,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    goals = goal_service.reorder_goals(db, owner_id, payload.ids)
    return GoalListResponse(goals=[GoalOut(**goal_service.goal_dict(g)) for g in goals])


@router.patch("/{goal_id}", response_model=GoalOut, summary="Edit, complete or move a goal")
def update_goal(
    goal_id: int,
    payload: GoalUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_owner_id),
):
    goal = goal_service.update_goal(
        db,
        owner_id,
        goal_id,
        text=payload.text,
        is_done=payload.is_done,
        sort_order=payload.sort_order,
    )
    return GoalOut(**goal_service.goal_dict(goal))


@router.delete("/{goal_id}", response_model=OkResponse, summary="Delete a goal")
def delete_goal(goal_id: int, db: Session = Depends(get_db), owner_id: str = Depends(get_owner_id)):
    goal_service.delete_goal(db, owner_id, goal_id)
    return OkResponse()
