"""GET /api/health: liveness check."""
from fastapi import APIRouter

import zodgen

router = APIRouter()


@router.get("/health")
def health_check():
    return {"status": "ok", "version": zodgen.__version__}
