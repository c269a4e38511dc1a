"""Health check route"""

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/ping")
async def ping():
    return {"success": True, "data": "pong"}
