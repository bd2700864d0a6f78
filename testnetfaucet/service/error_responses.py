from typing import Optional

from starlette import status

# Stable codes returned in the "code" field of every failed response
INTERNAL_ERROR_CODE = 10000
PARSE_ERROR_CODE = 10001
INVALID_ADDRESS_CODE = 10002
UNSUPPORTED_NETWORK_CODE = 10003
INVALID_TWEET_URL_CODE = 10004
ALREADY_CLAIMED_CODE = 10005
DISPATCH_FAILURE_CODE = 10006


class APIErrorResponse(Exception):
    """Base class for other exceptions"""

    def __init__(self):
        pass

    def to_status_code(self) -> int:
        raise NotImplementedError

    def to_code(self) -> int:
        raise NotImplementedError

    def to_message(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.to_message()


class ParseError(APIErrorResponse):
    def __init__(self, message_extra: Optional[str] = None):
        self.message_extra = message_extra

    def to_status_code(self) -> int:
        return status.HTTP_400_BAD_REQUEST

    def to_code(self) -> int:
        return PARSE_ERROR_CODE

    def to_message(self) -> str:
        result = "Failed to parse request body"
        if self.message_extra:
            result += f" - {self.message_extra}"
        return result


class InvalidAddressError(APIErrorResponse):
    def __init__(self, address: str):
        self.address = address

    def to_status_code(self) -> int:
        return status.HTTP_400_BAD_REQUEST

    def to_code(self) -> int:
        return INVALID_ADDRESS_CODE

    def to_message(self) -> str:
        return f"Invalid address: {self.address}"


class UnsupportedNetworkError(APIErrorResponse):
    def __init__(self, network: str):
        self.network = network

    def to_status_code(self) -> int:
        return status.HTTP_400_BAD_REQUEST

    def to_code(self) -> int:
        return UNSUPPORTED_NETWORK_CODE

    def to_message(self) -> str:
        return f"Network is not supported: {self.network}"


class InvalidAttributionReferenceError(APIErrorResponse):
    def __init__(self):
        pass

    def to_status_code(self) -> int:
        return status.HTTP_400_BAD_REQUEST

    def to_code(self) -> int:
        return INVALID_TWEET_URL_CODE

    def to_message(self) -> str:
        return "Invalid tweet url, expected https://x.com/<user>/status/<id>"


class AlreadyClaimedError(APIErrorResponse):
    """
    The address already holds a live claim for this asset and network.
    Not safe to retry until the eligibility window has passed.
    """

    def __init__(self, code: Optional[int] = None, message: Optional[str] = None):
        self.code = code
        self.message = message

    def to_status_code(self) -> int:
        return status.HTTP_409_CONFLICT

    def to_code(self) -> int:
        return self.code or ALREADY_CLAIMED_CODE

    def to_message(self) -> str:
        return self.message or "Address has already claimed, please try again later"


class DispatchFailureError(APIErrorResponse):
    """
    Funding transaction could not be sent, the reservation has been released.
    Safe to retry.
    """

    def __init__(self, code: Optional[int] = None, message: Optional[str] = None):
        self.code = code
        self.message = message

    def to_status_code(self) -> int:
        return status.HTTP_502_BAD_GATEWAY

    def to_code(self) -> int:
        return self.code or DISPATCH_FAILURE_CODE

    def to_message(self) -> str:
        result = "Failed to send transaction"
        if self.message:
            result += f" - {self.message}"
        return result


class InternalServerAPIError(APIErrorResponse):
    """Raised when an internal server error occurs"""

    def __init__(self):
        pass

    def to_status_code(self) -> int:
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_code(self) -> int:
        return INTERNAL_ERROR_CODE

    def to_message(self) -> str:
        return "The request could not be completed due to an internal server error."
