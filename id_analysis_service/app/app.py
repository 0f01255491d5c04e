import logging
import os

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from id_analysis_service.api.api import api
from id_analysis_service.processor.analyzer import ID_DOCUMENT_MODEL_ID, DocumentAnalyzer
from id_analysis_service.settings import Settings, settings


def check_credentials(app_settings: Settings) -> None:
    """
        :description: Warns about placeholder credentials, or refuses them when REQUIRE_CREDENTIALS is set
        :param app_settings: settings the application is created with
    """
    if app_settings.CREDENTIALS_CONFIGURED:
        return

    message = ("FORM_RECOGNIZER_KEY / FORM_RECOGNIZER_ENDPOINT are not set, "
               "placeholder values are in use and every analysis call will fail")
    if app_settings.REQUIRE_CREDENTIALS:
        raise RuntimeError(message)
    logging.warning(message)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
        :description: Creates FastAPI application with API router and the document analyzer
        :param app_settings: optional settings override, defaults to the environment settings
        :return: FastAPI application instance
    """

    app_settings = app_settings or settings
    check_credentials(app_settings)

    app = FastAPI(title="ID Analysis Service",
                  description="Identity document analysis API",
                  version=app_settings.ID_ANALYSIS_SERVICE_VERSION,
                  default_response_class=ORJSONResponse,
                  debug=app_settings.DEBUG_MODE)
    app.include_router(api)

    os.makedirs(app_settings.UPLOAD_DIR, exist_ok=True)

    app.state.settings = app_settings
    app.state.analyzer = DocumentAnalyzer(endpoint=app_settings.FORM_RECOGNIZER_ENDPOINT,
                                          key=app_settings.FORM_RECOGNIZER_KEY,
                                          model_id=ID_DOCUMENT_MODEL_ID,
                                          poll_timeout=app_settings.POLL_TIMEOUT,
                                          polling_interval=app_settings.POLLING_INTERVAL,
                                          log_level=app_settings.LOG_LEVEL)

    return app
