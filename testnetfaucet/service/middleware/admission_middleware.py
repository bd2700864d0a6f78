from prometheus_client import Counter
from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.base import RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from testnetfaucet import api_logger
from testnetfaucet.domain.admission.admission_controller import AdmissionController

logger = api_logger.get()

admission_rejections_counter = Counter(
    "faucet_admission_rejections",
    "Requests shed because the admission ceiling was reached",
)


class AdmissionMiddleware(BaseHTTPMiddleware):
    """Sheds load over the admission ceiling with a bare 503.

    Runs before the body is read, so rejected requests cost one counter check.
    """

    def __init__(
        self,
        app: ASGIApp,
        admission_controller: AdmissionController,
    ) -> None:
        super().__init__(app)
        self.admission_controller = admission_controller
        logger.info(f"Admission ceiling set to {admission_controller.ceiling}")

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.admission_controller.admit():
            admission_rejections_counter.inc()
            return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        return await call_next(request)
