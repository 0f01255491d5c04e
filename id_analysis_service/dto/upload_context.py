from pydantic import BaseModel


class UploadContext(BaseModel):
    """Holds the request-scoped state of one uploaded file.

    Created when the multipart body is stored on disk and discarded at the
    end of the request.
    """

    file_name: str
    """Original filename sent by the client (or the generated one if absent)."""

    size: int
    """Byte size of the stored upload."""

    tmp_file_path: str
    """Location of the transient copy inside the upload directory."""

    content_type: str | None = None
    """MIME type guessed from the content, informational only."""
