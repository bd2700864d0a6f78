from enum import Enum


class RequestStateKey(Enum):
    REQUEST_ID = "request_id"
    IP_ADDRESS = "ip_address"
