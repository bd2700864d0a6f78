import asyncio
from decimal import Decimal

from prometheus_client import Counter
from uuid_extensions import uuid7

import settings
from testnetfaucet import api_logger
from testnetfaucet.domain.faucet import validation
from testnetfaucet.domain.faucet.entities import ChainErrorKind
from testnetfaucet.domain.faucet.entities import ClaimKey
from testnetfaucet.domain.faucet.entities import ClaimRecord
from testnetfaucet.domain.faucet.entities import ClaimRequest
from testnetfaucet.domain.faucet.entities import ClaimResult
from testnetfaucet.domain.faucet.entities import ClaimState
from testnetfaucet.domain.faucet.entities import ClaimVariant
from testnetfaucet.repository.chain_api_repository import ChainApiRepository
from testnetfaucet.repository.claim_repository import ClaimNotReservedError
from testnetfaucet.repository.claim_repository import ClaimRepository
from testnetfaucet.repository.claim_repository import ClaimStorageError
from testnetfaucet.service import error_responses

# Fixed per variant, never taken from the request
CLAIM_AMOUNTS = {
    ClaimVariant.DIRECT: Decimal(settings.CLAIM_AMOUNT),
    ClaimVariant.TWEET: Decimal(settings.TWEET_CLAIM_AMOUNT),
}

logger = api_logger.get()

claims_counter = Counter(
    "faucet_claims",
    "Faucet claims by variant and outcome",
    ["variant", "outcome"],
)


async def execute(
    request: ClaimRequest,
    claim_repository: ClaimRepository,
    chain_repository: ChainApiRepository,
) -> ClaimResult:
    """Validate, reserve, dispatch and resolve a single claim."""
    try:
        validation.validate_claim_target(
            request.address, request.network, settings.TESTNET_NAME
        )
        if request.variant == ClaimVariant.TWEET:
            validation.validate_tweet_url(request.tweet_url)
    except error_responses.APIErrorResponse:
        claims_counter.labels(request.variant.value, "invalid").inc()
        raise

    amount = CLAIM_AMOUNTS[request.variant]
    record = ClaimRecord(
        key=ClaimKey.create(request.address, request.network),
        attempt_id=uuid7(),
        network=request.network,
        amount=amount,
        contract_address="",
        state=ClaimState.RESERVED,
    )
    try:
        reserved = await claim_repository.try_reserve(record)
    except ClaimStorageError as e:
        logger.error(f"Failed to reserve claim for {record.key.address}", exc_info=True)
        claims_counter.labels(request.variant.value, "dispatch_failed").inc()
        raise error_responses.DispatchFailureError() from e
    if not reserved:
        claims_counter.labels(request.variant.value, "already_claimed").inc()
        raise error_responses.AlreadyClaimedError()

    # Resolution has to finish even if the client goes away mid dispatch
    resolution = asyncio.create_task(
        _dispatch_and_resolve(request, record, claim_repository, chain_repository)
    )
    resolution.add_done_callback(_log_resolution)
    return await asyncio.shield(resolution)


def _log_resolution(task: asyncio.Task) -> None:
    # Reading the exception marks it retrieved when the caller was cancelled
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug(f"Claim resolved with {type(error).__name__}: {error}")


async def _dispatch_and_resolve(
    request: ClaimRequest,
    record: ClaimRecord,
    claim_repository: ClaimRepository,
    chain_repository: ChainApiRepository,
) -> ClaimResult:
    variant = request.variant.value
    try:
        result = await chain_repository.send_transaction(
            request.network, request.address, record.amount, request.tweet_url
        )
    except Exception as e:
        logger.error(f"Error sending transaction to {record.key.address}", exc_info=True)
        await _rollback(record, claim_repository)
        claims_counter.labels(variant, "dispatch_failed").inc()
        raise error_responses.DispatchFailureError() from e

    if result.is_success:
        await _commit(record, result.transaction_hash, claim_repository)
        claims_counter.labels(variant, "success").inc()
        return ClaimResult(transaction_hash=result.transaction_hash, amount=record.amount)

    if result.error_kind == ChainErrorKind.ADDRESS_LOCKED:
        # The slot is consumed elsewhere, releasing it would allow a second payout
        logger.info(f"Chain service reports {record.key.address} as locked")
        await _mark_consumed(record, claim_repository)
        claims_counter.labels(variant, "already_claimed").inc()
        raise error_responses.AlreadyClaimedError(result.code, result.message)

    await _rollback(record, claim_repository)
    claims_counter.labels(variant, "dispatch_failed").inc()
    raise error_responses.DispatchFailureError(result.code, result.message)


async def _commit(
    record: ClaimRecord, transaction_hash: str, claim_repository: ClaimRepository
) -> None:
    # Funds are already sent at this point, the caller still gets the hash
    try:
        record.committed_at = await claim_repository.commit(
            record.key, record.attempt_id, transaction_hash
        )
        record.state = ClaimState.COMMITTED
        record.transaction_hash = transaction_hash
    except (ClaimStorageError, ClaimNotReservedError):
        logger.error(
            f"Failed to commit claim {record.attempt_id} for {record.key.address}, "
            f"transaction_hash={transaction_hash}",
            exc_info=True,
        )


async def _mark_consumed(
    record: ClaimRecord, claim_repository: ClaimRepository
) -> None:
    try:
        record.committed_at = await claim_repository.mark_consumed(
            record.key, record.attempt_id
        )
        record.state = ClaimState.COMMITTED
    except (ClaimStorageError, ClaimNotReservedError):
        # Reservation stays until RESERVATION_TIMEOUT_SECONDS passes
        logger.error(
            f"Failed to mark claim {record.attempt_id} for {record.key.address} "
            f"as consumed",
            exc_info=True,
        )


async def _rollback(record: ClaimRecord, claim_repository: ClaimRepository) -> None:
    try:
        await claim_repository.rollback(record.key)
    except ClaimStorageError:
        # Reservation stays until RESERVATION_TIMEOUT_SECONDS passes
        logger.error(
            f"Failed to roll back claim {record.attempt_id} for {record.key.address}",
            exc_info=True,
        )
