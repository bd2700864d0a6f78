from typing import Optional

from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-Id"


async def add_response_headers(
    response: Response, request_id: Optional[str] = None
) -> Response:
    # Claim outcomes depend on time and state, never cache them
    response.headers["Cache-Control"] = "no-store"
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response
