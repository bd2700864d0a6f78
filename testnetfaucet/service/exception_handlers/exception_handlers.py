from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from testnetfaucet import api_logger
from testnetfaucet.service.error_responses import APIErrorResponse
from testnetfaucet.service.error_responses import InternalServerAPIError
from testnetfaucet.service.error_responses import ParseError
from testnetfaucet.utils import http_headers

logger = api_logger.get()


async def custom_exception_handler(request: Request, error: Exception):
    if not isinstance(error, APIErrorResponse):
        logger.error(
            f"Unhandled error for request_path={request.url.path}",
            exc_info=error,
        )
        error = InternalServerAPIError()
    return await _to_response(error)


async def request_validation_exception_handler(
    request: Request, error: RequestValidationError
):
    logger.info(
        f"Failed to parse request body for request_path={request.url.path}: "
        f"{error.errors()}"
    )
    return await _to_response(ParseError())


async def _to_response(error: APIErrorResponse) -> JSONResponse:
    return await http_headers.add_response_headers(
        JSONResponse(
            status_code=error.to_status_code(),
            content=jsonable_encoder(
                {
                    "code": error.to_code(),
                    "message": error.to_message(),
                    "data": None,
                }
            ),
        ),
    )
