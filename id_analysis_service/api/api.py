from fastapi import APIRouter

from id_analysis_service.api.analyze import analyze_api
from id_analysis_service.api.health import health_api

api = APIRouter()

api.include_router(health_api)
api.include_router(analyze_api)
