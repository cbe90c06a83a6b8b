# contact_relay/routers/health.py
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_class=PlainTextResponse)
async def health_root():
    return "ok"


@router.get("/", response_class=PlainTextResponse)
async def index():
    return "Contact relay is running"
