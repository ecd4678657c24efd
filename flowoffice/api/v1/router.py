from fastapi import APIRouter

from flowoffice.api.v1.boards import router as boards_router
from flowoffice.api.v1.options import router as options_router
from flowoffice.api.v1.projects import router as projects_router
from flowoffice.api.v1.switch_builder import router as switch_builder_router
from flowoffice.api.v1.triggers import router as triggers_router
from flowoffice.api.v1.webhooks import router as webhooks_router

v1_router = APIRouter()

v1_router.include_router(options_router)
v1_router.include_router(boards_router)
v1_router.include_router(projects_router)
v1_router.include_router(switch_builder_router)
v1_router.include_router(triggers_router)
v1_router.include_router(webhooks_router)
