# maisha_console/core/downloads.py
from fastapi import Response


def csv_download(content: str, filename: str) -> Response:
    """
    Deliver CSV text to the browser as a file download.

    Formatting is done elsewhere; this only attaches the headers.
    """
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
