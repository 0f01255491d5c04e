import traceback

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import ORJSONResponse
from starlette.datastructures import UploadFile

from id_analysis_service.dto.analyze_response import AnalyzeIdResponse, BadRequestResponse, ErrorResponse
from id_analysis_service.dto.upload_context import UploadContext
from id_analysis_service.processor.exceptions import AnalysisTimeoutError
from id_analysis_service.processor.fields import extract_id_document
from id_analysis_service.settings import settings
from id_analysis_service.utils.utils import delete_tmp_files, read_upload, setup_logging, store_upload

analyze_api = APIRouter()

log = setup_logging(component_name="analyze_api", log_level=settings.LOG_LEVEL)

MISSING_FILE_MESSAGE = "An image must be sent in the 'file' field."
FILE_FIELD = "file"

# the form is read by hand, so the multipart body is documented here
UPLOAD_REQUEST_BODY = {
    "requestBody": {
        "required": True,
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {FILE_FIELD: {"type": "string", "format": "binary"}},
                    "required": [FILE_FIELD],
                }
            }
        },
    }
}


async def get_upload_file(request: Request) -> UploadFile | None:
    """Return the file part named `file`, or None when the request carries no such file.

    A plain text field named `file` (or a part without a filename) is not a file.
    """
    form = await request.form()
    file = form.get(FILE_FIELD)
    if isinstance(file, UploadFile):
        return file
    return None


async def discard_upload(upload: UploadContext) -> None:
    try:
        await run_in_threadpool(delete_tmp_files, [upload.tmp_file_path])
    except OSError:
        log.error("could not delete temporary file " + upload.tmp_file_path + ": " + str(traceback.format_exc()))


@analyze_api.post(
    "/analyze-id",
    response_model=AnalyzeIdResponse,
    response_class=ORJSONResponse,
    responses={400: {"model": BadRequestResponse}, 500: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
    openapi_extra=UPLOAD_REQUEST_BODY,
)
async def analyze_id(request: Request) -> ORJSONResponse:
    """
        :description: Analyses an uploaded identity document and returns the recognized fields
        :param request: multipart request, the document is read from the `file` field (image or PDF)
        :return: normalized identity fields plus every recognized field
    """
    log.info("request received on /analyze-id")

    try:
        file = await get_upload_file(request)
    except Exception:
        log.warning("could not parse request body: " + str(traceback.format_exc()))
        file = None

    if file is None:
        log.warning("no file received")
        return ORJSONResponse(status_code=400, content=BadRequestResponse(error=MISSING_FILE_MESSAGE).model_dump())

    app_settings = request.app.state.settings
    analyzer = request.app.state.analyzer
    upload: UploadContext | None = None
    upload_deleted = False

    try:
        upload = await run_in_threadpool(store_upload, file.file, file.filename, app_settings.UPLOAD_DIR)
        log.info(f"file received: {upload.file_name}, size: {upload.size} bytes, "
                 f"detected type: {upload.content_type}")

        stream = await run_in_threadpool(read_upload, upload)
        log.debug("file read from " + upload.tmp_file_path)

        analyze_result = await analyzer.analyze(stream)

        log.info("analysis completed, processing results")
        response = extract_id_document(analyze_result)

        await run_in_threadpool(delete_tmp_files, [upload.tmp_file_path])
        upload_deleted = True
        log.info("temporary file deleted")

        log.info("sending result to client")
        return ORJSONResponse(content=response.to_content())

    except AnalysisTimeoutError as exception:
        log.error("error analyzing document: " + str(exception))
        return ORJSONResponse(status_code=504, content=ErrorResponse(error=str(exception)).model_dump())

    except Exception as exception:
        log.error("error analyzing document: " + str(traceback.format_exc()))
        return ORJSONResponse(status_code=500, content=ErrorResponse(error=str(exception)).model_dump())

    finally:
        if upload is not None and not upload_deleted and app_settings.CLEANUP_ON_ERROR:
            await discard_upload(upload)
