from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse

from id_analysis_service.dto.info_response import InfoResponse
from id_analysis_service.utils.utils import get_app_info

health_api = APIRouter(prefix="/api")


@health_api.get("/health", response_class=ORJSONResponse)
def health() -> ORJSONResponse:
    return ORJSONResponse(content={"status": "healthy"})


@health_api.get("/info", response_model=InfoResponse, response_class=ORJSONResponse)
def info(request: Request) -> ORJSONResponse:
    analyzer = request.app.state.analyzer
    return ORJSONResponse(content=get_app_info(request.app.state.settings, analyzer.model_id))
