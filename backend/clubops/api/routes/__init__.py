"""API routes."""

from fastapi import APIRouter

from clubops.api.routes import dancers, financial, queue, vip_rooms

api_router = APIRouter()

# Club-scoped routes: bearer token plus Club-ID header
api_router.include_router(dancers.router, prefix="/dancers", tags=["dancers"])
api_router.include_router(queue.router, prefix="/queue", tags=["queue"])
api_router.include_router(vip_rooms.router, prefix="/vip-rooms", tags=["vip-rooms"])
api_router.include_router(financial.router, prefix="/financial", tags=["financial"])
