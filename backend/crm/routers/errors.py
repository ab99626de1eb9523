from fastapi import HTTPException

from crm.utils.exceptions import (
    AuthenticationError,
    CrmError,
    DocumentNotFoundError,
    DraftValidationError,
    EmptyInputError,
    ExtractionError,
    NothingToExportError,
    RecordNotFoundError,
    SpreadsheetError,
    StoreError,
    StoreUnavailableError,
)

# Most specific first: subclasses must precede their bases.
_STATUS_CODES: list[tuple[type[CrmError], int]] = [
    (EmptyInputError, 400),
    (SpreadsheetError, 400),
    (NothingToExportError, 400),
    (AuthenticationError, 401),
    (RecordNotFoundError, 404),
    (DocumentNotFoundError, 404),
    (DraftValidationError, 422),
    (ExtractionError, 502),
    (StoreUnavailableError, 503),
    (StoreError, 502),
]


def to_http_exception(error: CrmError) -> HTTPException:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))
