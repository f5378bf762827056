from fastapi import APIRouter

from src.scribe.api.v1 import auth, onboarding, users, workspaces

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(onboarding.router)
api_router.include_router(users.router)
api_router.include_router(workspaces.router)
