from typing import Any, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def api_response(
    *,
    data: Optional[Any] = None,
    message: str = "Operation successful",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    Envelope shared by every JSON endpoint.
    status is "success" below 400 and "error" otherwise.
    """
    status_str = "success" if status_code < 400 else "error"
    data = jsonable_encoder(data) if data is not None else {}

    return JSONResponse(
        status_code=status_code,
        content={
            "status_code": status_code,
            "status": status_str,
            "message": message,
            "data": data,
        },
    )


def redirect_with_flash(url: str, **flash: str) -> str:
    """Append flash values (success/error) to a redirect target as query params."""
    parts = urlsplit(url)
    query = dict(parse_qsl(parts.query))
    query.update(flash)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))
