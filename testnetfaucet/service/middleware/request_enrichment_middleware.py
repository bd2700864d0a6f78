from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from uuid_extensions import uuid7

from testnetfaucet.service.middleware import util
from testnetfaucet.service.middleware.entities import RequestStateKey


class RequestEnrichmentMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        util.set_state(request, RequestStateKey.REQUEST_ID, str(uuid7()))
        util.set_state(request, RequestStateKey.IP_ADDRESS, _get_ip_address(request))
        return await call_next(request)


def _get_ip_address(request: Request) -> Optional[str]:
    # First hop is the original client when running behind a proxy
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None
