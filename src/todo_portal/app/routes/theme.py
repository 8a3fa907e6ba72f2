from fastapi import APIRouter, HTTPException

from todo_portal.domain.errors import PersistenceError
from todo_portal.domain.theme_models import ThemeUpdate
from todo_portal.services.theme_service import ThemeService

router = APIRouter(prefix="/api/theme", tags=["theme"])


def get_service() -> ThemeService:
    # Overwritten in main.py:
    # theme.get_service = lambda: theme_svc
    raise RuntimeError("ThemeService not wired")


@router.get("", response_model=ThemeUpdate)
async def read_theme():
    return ThemeUpdate(theme=await get_service().get_theme())


@router.put("", response_model=ThemeUpdate)
async def update_theme(payload: ThemeUpdate):
    try:
        theme = await get_service().set_theme(payload.theme)
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return ThemeUpdate(theme=theme)


@router.post("/toggle", response_model=ThemeUpdate)
async def toggle_theme():
    try:
        theme = await get_service().toggle()
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return ThemeUpdate(theme=theme)
