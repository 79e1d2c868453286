from fastapi import APIRouter


router = APIRouter()


@router.get("/health", summary="Basic health check endpoint")
async def health_check():
    """
    Basic health check endpoint.
    Does not touch the database or the gateway.
    """
    return {"status": "ok"}
