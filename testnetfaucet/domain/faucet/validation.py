import re
from typing import Optional

from testnetfaucet.service import error_responses

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
# Anything after the numeric status id is ignored
TWEET_URL_PATTERN = re.compile(
    r"^https?://(twitter\.com|x\.com)/[a-zA-Z0-9_]+/status/\d+"
)


def is_valid_address(address: Optional[str]) -> bool:
    if not address:
        return False
    return ADDRESS_PATTERN.fullmatch(address) is not None


def is_valid_tweet_url(url: Optional[str]) -> bool:
    if not url:
        return False
    return TWEET_URL_PATTERN.match(url) is not None


def is_supported_network(network: Optional[str], supported_network: str) -> bool:
    if not network:
        return False
    return network.casefold() == supported_network.casefold()


def validate_claim_target(address: str, network: str, supported_network: str) -> None:
    if not is_valid_address(address):
        raise error_responses.InvalidAddressError(address)
    if not is_supported_network(network, supported_network):
        raise error_responses.UnsupportedNetworkError(network)


def validate_tweet_url(url: Optional[str]) -> None:
    if not is_valid_tweet_url(url):
        raise error_responses.InvalidAttributionReferenceError()
