from fastapi import APIRouter

from . import advertiser, applications, campaigns, health, me

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(campaigns.router)
api_router.include_router(applications.router)
api_router.include_router(advertiser.router)
api_router.include_router(me.router)
