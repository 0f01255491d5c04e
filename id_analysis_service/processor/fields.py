"""Field extraction for prebuilt ID document analysis results.

Works on the REST wire shape of an analysis result, e.g.::

    {"documents": [{"docType": "idDocument.passport",
                    "fields": {"FirstName": {"type": "string", "valueString": "Ana"}}}]}
"""

from collections.abc import Mapping
from typing import Any

from id_analysis_service.dto.analyze_response import AnalyzeIdResponse
from id_analysis_service.processor.exceptions import NoDocumentExtractedError

# typed value slots of a document field, checked in this order
FIELD_VALUE_PRIORITY: tuple[str, ...] = (
    "valueString",
    "valueDate",
    "valueNumber",
    "valueCountryRegion",
    "value",
)

NO_DOCUMENT_MESSAGE = "No document was extracted."


def resolve_field_value(field: Mapping[str, Any] | None) -> Any:
    """Return the first populated value slot of a field.

    Args:
        field: Field as returned by the service, or None when absent.

    Returns:
        Any: Value of the first slot in FIELD_VALUE_PRIORITY that is not null,
            None if the field is missing or has none of them.
    """
    if not field:
        return None

    for slot in FIELD_VALUE_PRIORITY:
        value = field.get(slot)
        if value is not None:
            return value

    return None


def extract_id_document(analyze_result: Mapping[str, Any] | None) -> AnalyzeIdResponse:
    """Map the first analysed document onto the normalized response.

    Raises:
        NoDocumentExtractedError: the result holds no documents.
    """
    documents = (analyze_result or {}).get("documents") or []
    if not documents:
        raise NoDocumentExtractedError(NO_DOCUMENT_MESSAGE)

    document = documents[0]
    fields: Mapping[str, Any] = document.get("fields") or {}

    first_name = resolve_field_value(fields.get("FirstName"))
    last_name = resolve_field_value(fields.get("LastName"))
    document_number = (resolve_field_value(fields.get("DocumentNumber"))
                       or resolve_field_value(fields.get("IdentityNumber")))
    full_name = resolve_field_value(fields.get("FullName"))
    if not full_name:
        full_name = f"{first_name} {last_name}" if first_name and last_name else None

    return AnalyzeIdResponse(
        doc_type=document.get("docType"),
        full_name=full_name,
        first_name=first_name,
        last_name=last_name,
        document_number=document_number,
        date_of_birth=resolve_field_value(fields.get("DateOfBirth")),
        nationality=resolve_field_value(fields.get("Nationality")),
        date_of_expiration=resolve_field_value(fields.get("DateOfExpiration")),
        all_fields={name: resolve_field_value(field) for name, field in fields.items()},
    )
