"""
relay/routers/health.py

GET /health liveness endpoint. Always healthy while the process serves.
"""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
