# Health check endpoint - returns "Pong" for connectivity testing

from fastapi import APIRouter

router = APIRouter()

@router.get("/ping")
async def ping():
    return {"status": "online", "message": "Pong"}
