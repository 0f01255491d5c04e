"""Utility helpers for the ID analysis service.

This module centralizes shared behaviors across the API and processor layers,
including service info, upload storage on disk, file type detection, temp file
cleanup and logging setup.
"""

import logging
import os
import shutil
import sys
import uuid
from typing import IO

import filetype

from id_analysis_service.dto.upload_context import UploadContext
from id_analysis_service.settings import Settings


def get_app_info(app_settings: Settings, model_id: str) -> dict:
    """Return general information about the application.

    Used by the `/api/info` endpoint. Secrets are never included.

    Returns:
        dict: Application information (name, version, model id, credential state).
    """
    return {"service_app_name": "id-analysis-service",
            "service_version": app_settings.ID_ANALYSIS_SERVICE_VERSION,
            "service_model": model_id,
            "credentials_configured": app_settings.CREDENTIALS_CONFIGURED}


def delete_tmp_files(file_paths: list[str]) -> None:
    """Delete temporary files if they exist.

    Args:
        file_paths: Paths to delete (missing paths are ignored).
    """
    for file_path in file_paths:
        if os.path.exists(file_path):
            os.remove(file_path)


def detect_file_type(stream: bytes) -> object | None:
    """Guess the file type from the magic bytes at the head of the stream.

    Args:
        stream: Raw bytes to inspect.

    Returns:
        object | None: filetype match (with `extension`/`mime`), or None if unknown.
    """
    file_type = None
    try:
        file_type = filetype.guess(stream)
    except TypeError:
        logging.error("Could not determine file Type")
    return file_type


def store_upload(source: IO[bytes], file_name: str | None, upload_dir: str) -> UploadContext:
    """Copy an uploaded file object into the upload directory.

    The stored file gets a random name; the extension is guessed from
    the content and left out when the type is unknown.

    Args:
        source: Readable binary file object positioned at the start.
        file_name: Original filename as sent by the client.
        upload_dir: Directory that holds transient uploads.

    Returns:
        UploadContext: Description of the stored upload.
    """
    os.makedirs(upload_dir, exist_ok=True)

    head = source.read(262)
    source.seek(0)
    file_type = detect_file_type(head)

    tmp_file_name = uuid.uuid4().hex
    if file_type is not None:
        tmp_file_name += "." + file_type.extension  # type: ignore[attr-defined]
    tmp_file_path = os.path.join(upload_dir, tmp_file_name)

    with open(tmp_file_path, mode="wb") as f:
        shutil.copyfileobj(source, f)

    return UploadContext(
        file_name=file_name or tmp_file_name,
        size=os.path.getsize(tmp_file_path),
        tmp_file_path=tmp_file_path,
        content_type=file_type.mime if file_type is not None else None,  # type: ignore[attr-defined]
    )


def read_upload(upload: UploadContext) -> bytes:
    with open(upload.tmp_file_path, mode="rb") as f:
        return f.read()


def setup_logging(component_name: str = "config_logger", log_level: int = 20) -> logging.Logger:
    """Configure a logger that writes to stdout with a consistent format.

    Args:
        component_name: Logger name to configure.
        log_level: Logging level to set on the logger and handler.

    Returns:
        logging.Logger: Configured logger instance.
    """
    root_logger = logging.getLogger(component_name)
    log_format = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
    log_handler = logging.StreamHandler(sys.stdout)
    log_handler.setFormatter(logging.Formatter(fmt=log_format))
    log_handler.setLevel(level=log_level)
    root_logger.setLevel(level=log_level)
    root_logger.propagate = False

    # only add the handler if a previous one does not exists
    handler_exists = False
    for h in root_logger.handlers:
        if isinstance(h, logging.StreamHandler) and h.level is log_handler.level:
            handler_exists = True
            break

    if not handler_exists:
        root_logger.addHandler(log_handler)

    return root_logger
