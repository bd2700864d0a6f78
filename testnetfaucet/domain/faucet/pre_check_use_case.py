import settings
from testnetfaucet import api_logger
from testnetfaucet.domain.faucet import validation
from testnetfaucet.domain.faucet.entities import ChainErrorKind
from testnetfaucet.domain.faucet.entities import ClaimKey
from testnetfaucet.domain.faucet.entities import PreCheckResult
from testnetfaucet.repository.chain_api_repository import ChainApiRepository
from testnetfaucet.repository.claim_repository import ClaimRepository
from testnetfaucet.repository.claim_repository import ClaimStorageError
from testnetfaucet.service import error_responses

PRE_CHECK_PASS_MESSAGE = "PreCheck Pass"

logger = api_logger.get()


async def execute(
    network: str,
    address: str,
    claim_repository: ClaimRepository,
    chain_repository: ChainApiRepository,
) -> PreCheckResult:
    """Read-only: validates and checks eligibility, never reserves or dispatches."""
    validation.validate_claim_target(address, network, settings.TESTNET_NAME)

    key = ClaimKey.create(address, network)
    try:
        is_eligible = await claim_repository.is_eligible(key)
    except ClaimStorageError as e:
        logger.error(f"Failed to check eligibility for {key.address}", exc_info=True)
        raise error_responses.DispatchFailureError() from e
    if not is_eligible:
        raise error_responses.AlreadyClaimedError()

    result = await chain_repository.pre_check(network, address)
    if result.error_kind == ChainErrorKind.ADDRESS_LOCKED:
        raise error_responses.AlreadyClaimedError(result.code, result.message)
    if result.error_kind is not None:
        raise error_responses.DispatchFailureError(result.code, result.message)
    return PreCheckResult(passed=True, message=PRE_CHECK_PASS_MESSAGE)
