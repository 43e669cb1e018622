from fastapi import APIRouter

from user_access_platform.api.auth import router as auth_router
from user_access_platform.api.users import router as users_router


router = APIRouter()

router.include_router(auth_router)
router.include_router(users_router)


@router.get("/health")
def health():
    return {"status": "ok"}
