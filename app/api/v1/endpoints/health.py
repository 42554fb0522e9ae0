from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.db.dependencies import get_db

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    database: str


@router.get("", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """Check database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        return HealthResponse(status="healthy", database="healthy")
    except Exception as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": f"unhealthy: {str(e)}"},
        )


@router.get("/live", response_model=dict)
def liveness_check():
    """Kubernetes liveness probe."""
    return {"status": "alive"}
