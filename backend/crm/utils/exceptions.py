class CrmError(Exception):
    """Base class for every error the CRM surfaces to the user."""


class StoreError(CrmError):
    """A create/update/delete or snapshot read against the document store failed."""


class StoreUnavailableError(StoreError):
    """The document store could not be initialised."""


class DocumentNotFoundError(StoreError):
    pass


class AuthenticationError(CrmError):
    pass


class ExtractionError(CrmError):
    """Transport failure, bad status, missing payload or malformed JSON from the LLM."""


class EmptyInputError(CrmError):
    pass


class DraftValidationError(CrmError):
    pass


class SpreadsheetError(CrmError):
    pass


class NothingToExportError(CrmError):
    pass


class RecordNotFoundError(CrmError):
    pass
