from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.auth.dependencies import get_current_active_user
from app.api.profile.models import User
from app.api.profile.schemas import UserProfile, UserShort
from app.api.profile.service import ProfileService
from app.database.database import get_db

router = APIRouter(prefix="/api/profile", tags=["profile"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


@router.get("/me", response_model=UserProfile)
async def get_my_profile(current_user: User = Depends(get_current_active_user)):
    return current_user


@router.get("/{user_id}", response_model=UserShort)
async def get_profile(
        user_id: str,
        current_user: User = Depends(get_current_active_user),
        profile_service: ProfileService = Depends(get_profile_service)
):
    return profile_service.get_user(user_id)
