from datetime import timedelta

import settings
from testnetfaucet.repository.chain_api_repository import ChainApiRepository
from testnetfaucet.repository.claim_repository import ClaimRepository
from testnetfaucet.repository.connection import get_session_provider
from testnetfaucet.repository.connection import get_session_provider_read

_claim_repository: ClaimRepository
_chain_api_repository: ChainApiRepository


# pylint: disable=W0603
def init_globals():
    global _claim_repository
    global _chain_api_repository

    _claim_repository = ClaimRepository(
        get_session_provider(),
        get_session_provider_read(),
        eligibility_window=timedelta(hours=settings.ELIGIBILITY_WINDOW_HOURS),
        reservation_timeout=timedelta(seconds=settings.RESERVATION_TIMEOUT_SECONDS),
    )
    _chain_api_repository = ChainApiRepository(
        settings.CHAIN_API_BASE_URL,
        settings.CHAIN_API_KEY,
        settings.CHAIN_API_TIMEOUT_SECONDS,
        settings.CHAIN_ADDRESS_LOCKED_MESSAGE,
    )


def get_claim_repository() -> ClaimRepository:
    return _claim_repository


def get_chain_api_repository() -> ChainApiRepository:
    return _chain_api_repository
