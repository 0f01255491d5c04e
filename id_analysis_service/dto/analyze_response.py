from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AnalyzeIdResponse(BaseModel):
    """Success payload for /analyze-id.

    Serialized with camelCase aliases; absent values are dropped from the
    JSON body rather than sent as null.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = Field(True, description="Always true on the success path.")
    doc_type: str | None = Field(None, description="Document type tag, e.g. idDocument.passport.")
    full_name: Any = None
    first_name: Any = None
    last_name: Any = None
    document_number: Any = None
    date_of_birth: Any = None
    nationality: Any = None
    date_of_expiration: Any = None
    all_fields: dict[str, Any] = Field(default_factory=dict, description="Every recognized field, resolved.")

    def to_content(self) -> dict[str, Any]:
        content = self.model_dump(by_alias=True, exclude_none=True)
        content["allFields"] = {k: v for k, v in self.all_fields.items() if v is not None}
        return content


class BadRequestResponse(BaseModel):
    """Response payload when the request carries no file."""

    error: str = Field(..., description="Human readable reason.")


class ErrorResponse(BaseModel):
    """Response payload for processing failures."""

    success: bool = Field(False)
    error: str = Field(..., description="Raw error message.")
