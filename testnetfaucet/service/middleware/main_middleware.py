import time

from prometheus_client import Counter
from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from testnetfaucet import api_logger
from testnetfaucet.service.error_responses import APIErrorResponse
from testnetfaucet.service.middleware import util
from testnetfaucet.service.middleware.entities import RequestStateKey
from testnetfaucet.utils import http_headers

logger = api_logger.get()

response_status_codes_counter = Counter(
    "response_status_codes",
    "Total number of HTTP status codes of each endpoint",
    ["endpoint", "status_code"],
)


class MainMiddleware(BaseHTTPMiddleware):
    """Request logging, status code metrics and common response headers."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = util.get_state(request, RequestStateKey.REQUEST_ID)
        ip_address = util.get_state(request, RequestStateKey.IP_ADDRESS)
        path = request.url.path

        logger.info(
            f"REQUEST STARTED request_id={request_id} request_path={path} "
            f"ip={ip_address}"
        )
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception as error:
            status_code = _log_error(error, request_id, path)
            response_status_codes_counter.labels(path, status_code).inc()
            raise error from None

        response_status_codes_counter.labels(path, response.status_code).inc()
        if response.status_code != status.HTTP_404_NOT_FOUND:
            logger.info(
                f"REQUEST COMPLETED request_id={request_id} request_path={path} "
                f"completed_in={(time.perf_counter() - started) * 1000:.2f}ms "
                f"status_code={response.status_code}"
            )
        return await http_headers.add_response_headers(response, request_id)


def _log_error(error: Exception, request_id: str, path: str) -> int:
    if not isinstance(error, APIErrorResponse):
        logger.error(
            f"Error while handling request. request_id={request_id} "
            f"request_path={path}",
            exc_info=True,
        )
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    status_code = error.to_status_code()
    logger.error(
        f"Error while handling request. request_id={request_id} "
        f"request_path={path} "
        f"status_code={status_code} "
        f"code={error.to_code()} "
        f"message={error.to_message()}",
        exc_info=status_code == status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return status_code
