import pytest

from testnetfaucet.domain.faucet import validation
from testnetfaucet.service import error_responses

VALID_ADDRESS = "0xABCDEF0123456789abcdef0123456789ABCDEF01"


def test_valid_addresses():
    assert validation.is_valid_address(VALID_ADDRESS)
    assert validation.is_valid_address("0x" + "0" * 40)
    assert validation.is_valid_address("0x" + "f" * 40)


@pytest.mark.parametrize(
    "address",
    [
        "0x" + "Z" * 40,
        "0x" + "a" * 39,
        "0x" + "a" * 41,
        "a" * 40,
        "0X" + "a" * 40,
        VALID_ADDRESS + "\n",
        " " + VALID_ADDRESS,
        "",
        None,
    ],
)
def test_invalid_addresses(address):
    assert not validation.is_valid_address(address)


@pytest.mark.parametrize(
    "url",
    [
        "https://twitter.com/someuser/status/12345",
        "https://x.com/someuser/status/12345",
        "http://x.com/some_user/status/1",
        "https://x.com/someuser/status/12345?s=20",
        "https://twitter.com/someuser/status/12345/photo/1",
    ],
)
def test_valid_tweet_urls(url):
    assert validation.is_valid_tweet_url(url)


@pytest.mark.parametrize(
    "url",
    [
        "https://facebook.com/someuser/status/12345",
        "https://x.com/someuser/status/",
        "https://x.com/someuser/status/abc",
        "https://x.com/someuser",
        "ftp://x.com/someuser/status/12345",
        "https://evil.com/?https://x.com/someuser/status/12345",
        "",
        None,
    ],
)
def test_invalid_tweet_urls(url):
    assert not validation.is_valid_tweet_url(url)


def test_network_is_case_insensitive():
    assert validation.is_supported_network("Aries", "aries")
    assert validation.is_supported_network("ARIES", "aries")
    assert not validation.is_supported_network("taurus", "aries")
    assert not validation.is_supported_network("", "aries")


def test_validate_claim_target_raises_classified_errors():
    with pytest.raises(error_responses.InvalidAddressError) as exc_info:
        validation.validate_claim_target("0x123", "aries", "aries")
    assert exc_info.value.to_code() == error_responses.INVALID_ADDRESS_CODE
    assert "0x123" in exc_info.value.to_message()

    with pytest.raises(error_responses.UnsupportedNetworkError) as exc_info:
        validation.validate_claim_target(VALID_ADDRESS, "mainnet", "aries")
    assert exc_info.value.to_code() == error_responses.UNSUPPORTED_NETWORK_CODE

    validation.validate_claim_target(VALID_ADDRESS, "ARIES", "aries")


def test_validate_tweet_url():
    with pytest.raises(error_responses.InvalidAttributionReferenceError):
        validation.validate_tweet_url("https://x.com/someuser")
    validation.validate_tweet_url("https://x.com/someuser/status/12345")
