import os

from crm.config import settings

ALLOWED_EXTENSIONS = {ext.strip() for ext in settings.allowed_extensions.split(",")}


def validate_spreadsheet(filename: str | None, size: int) -> None:
    if not filename:
        raise ValueError("No file selected")
    ext = os.path.splitext(filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValueError(
            f"File type '{ext}' not allowed. Allowed: {sorted(ALLOWED_EXTENSIONS)}"
        )
    if size > settings.max_file_size_mb * 1024 * 1024:
        raise ValueError(f"File is larger than {settings.max_file_size_mb} MB")
    if size == 0:
        raise ValueError("File is empty")
