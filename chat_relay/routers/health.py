from datetime import datetime, timezone

from fastapi import APIRouter

from chat_relay.schemas.chat import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")}
