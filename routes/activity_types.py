from typing import List
from fastapi import APIRouter

from schemas import ActivityTypeRead
from services.activity_types import list_activity_types

router = APIRouter(prefix="/activity-types", tags=["Activity types"])


@router.get("/", response_model=List[ActivityTypeRead])
def get_activity_types():
    """The 11 categories with their badge, calendar and border colors."""
    return list_activity_types()
