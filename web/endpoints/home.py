"""
Home route: exposes the session and conversion state for rendering.
"""
from fastapi import APIRouter, Request

from settings import HOME_ROUTE

router = APIRouter()


@router.get(HOME_ROUTE)
async def home(request: Request):
    """Current view state; a pending login error is shown once and then cleared"""
    return request.app.state.context.view_state()
