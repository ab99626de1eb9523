from crm.models.document import Document

__all__ = ["Document"]
