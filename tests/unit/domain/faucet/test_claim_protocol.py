"""Claim use cases against a real ClaimRepository on a SQLite file."""

import asyncio
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock
from unittest.mock import patch

import pytest
from uuid_extensions import uuid7

import settings
from testnetfaucet.domain.faucet import claim_use_case
from testnetfaucet.domain.faucet import pre_check_use_case
from testnetfaucet.domain.faucet.entities import ChainDispatchResult
from testnetfaucet.domain.faucet.entities import ChainErrorKind
from testnetfaucet.domain.faucet.entities import ClaimKey
from testnetfaucet.domain.faucet.entities import ClaimRecord
from testnetfaucet.domain.faucet.entities import ClaimRequest
from testnetfaucet.domain.faucet.entities import ClaimState
from testnetfaucet.domain.faucet.entities import ClaimVariant
from testnetfaucet.repository.chain_api_repository import ChainApiRepository
from testnetfaucet.service import error_responses

ADDRESS = "0xABCDEF0123456789abcdef0123456789ABCDEF01"
TX_HASH = "0x52a0bb4ba4e6d8ed4a7ab6c93ac6ab5bb3bd2d5a4c63e6f07e5e2cba8c0ab58c"


def _request(address: str = ADDRESS) -> ClaimRequest:
    return ClaimRequest(
        variant=ClaimVariant.DIRECT,
        network=settings.TESTNET_NAME,
        address=address,
    )


def _key(address: str = ADDRESS) -> ClaimKey:
    return ClaimKey.create(address, settings.TESTNET_NAME)


@pytest.fixture
def chain_repository():
    mock = AsyncMock(spec=ChainApiRepository)
    mock.send_transaction.return_value = ChainDispatchResult(
        transaction_hash=TX_HASH, code=0, message="success"
    )
    mock.pre_check.return_value = ChainDispatchResult(code=0, message="success")
    return mock


async def test_concurrent_claims_commit_once(claim_repository, chain_repository):
    release = asyncio.Event()

    async def slow_send(*args, **kwargs):
        await release.wait()
        return ChainDispatchResult(transaction_hash=TX_HASH, code=0, message="success")

    chain_repository.send_transaction.side_effect = slow_send

    first = asyncio.create_task(
        claim_use_case.execute(_request(), claim_repository, chain_repository)
    )
    # Same address, different case
    second = asyncio.create_task(
        claim_use_case.execute(
            _request(ADDRESS.lower()), claim_repository, chain_repository
        )
    )
    for _ in range(100):
        if chain_repository.send_transaction.await_count or second.done():
            break
        await asyncio.sleep(0.01)
    release.set()
    results = await asyncio.gather(first, second, return_exceptions=True)

    successes = [r for r in results if not isinstance(r, Exception)]
    conflicts = [
        r for r in results if isinstance(r, error_responses.AlreadyClaimedError)
    ]
    assert len(successes) == 1
    assert len(conflicts) == 1
    assert chain_repository.send_transaction.await_count == 1
    record = await claim_repository.get_claim(_key())
    assert record.state == ClaimState.COMMITTED
    assert record.transaction_hash == TX_HASH


async def test_many_concurrent_claims_single_payout(claim_repository, chain_repository):
    results = await asyncio.gather(
        *[
            claim_use_case.execute(_request(), claim_repository, chain_repository)
            for _ in range(10)
        ],
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    assert len(successes) == 1
    assert all(
        isinstance(r, error_responses.AlreadyClaimedError)
        for r in results
        if isinstance(r, Exception)
    )
    assert chain_repository.send_transaction.await_count == 1


async def test_dispatch_failure_leaves_address_eligible(
    claim_repository, chain_repository
):
    chain_repository.send_transaction.return_value = ChainDispatchResult(
        error_kind=ChainErrorKind.FAILED, code=5000, message="nonce too low"
    )

    with pytest.raises(error_responses.DispatchFailureError):
        await claim_use_case.execute(_request(), claim_repository, chain_repository)

    assert await claim_repository.is_eligible(_key())
    assert await claim_repository.get_claim(_key()) is None

    chain_repository.send_transaction.return_value = ChainDispatchResult(
        transaction_hash=TX_HASH, code=0, message="success"
    )
    result = await claim_use_case.execute(_request(), claim_repository, chain_repository)
    assert result.transaction_hash == TX_HASH


async def test_address_locked_blocks_for_window(
    claim_repository, chain_repository, clock
):
    chain_repository.send_transaction.return_value = ChainDispatchResult(
        error_kind=ChainErrorKind.ADDRESS_LOCKED, code=4001, message="locked"
    )

    with pytest.raises(error_responses.AlreadyClaimedError):
        await claim_use_case.execute(_request(), claim_repository, chain_repository)

    record = await claim_repository.get_claim(_key())
    assert record.state == ClaimState.COMMITTED
    assert record.transaction_hash is None
    assert record.committed_at == clock.now

    # Well past the reservation timeout, still inside the window
    clock.advance(claim_repository.reservation_timeout + timedelta(minutes=1))
    assert not await claim_repository.is_eligible(_key())
    with pytest.raises(error_responses.AlreadyClaimedError):
        await claim_use_case.execute(_request(), claim_repository, chain_repository)
    assert chain_repository.send_transaction.await_count == 1

    clock.advance(claim_repository.eligibility_window)
    assert await claim_repository.is_eligible(_key())


async def test_committed_claim_blocks_for_window(
    claim_repository, chain_repository, clock
):
    await claim_use_case.execute(_request(), claim_repository, chain_repository)

    clock.advance(claim_repository.eligibility_window - timedelta(seconds=1))
    assert not await claim_repository.is_eligible(_key())
    with pytest.raises(error_responses.AlreadyClaimedError):
        await claim_use_case.execute(_request(), claim_repository, chain_repository)

    clock.advance(timedelta(seconds=2))
    assert await claim_repository.is_eligible(_key())
    await claim_use_case.execute(_request(), claim_repository, chain_repository)
    assert chain_repository.send_transaction.await_count == 2


async def test_other_address_not_blocked(claim_repository, chain_repository):
    other_address = "0x" + "1" * 40
    await claim_use_case.execute(_request(), claim_repository, chain_repository)

    result = await claim_use_case.execute(
        _request(other_address), claim_repository, chain_repository
    )

    assert result.transaction_hash == TX_HASH


async def test_cancelled_request_still_resolves(claim_repository, chain_repository):
    release = asyncio.Event()
    dispatched = asyncio.Event()

    async def slow_send(*args, **kwargs):
        dispatched.set()
        await release.wait()
        return ChainDispatchResult(transaction_hash=TX_HASH, code=0, message="success")

    chain_repository.send_transaction.side_effect = slow_send

    task = asyncio.create_task(
        claim_use_case.execute(_request(), claim_repository, chain_repository)
    )
    await asyncio.wait_for(dispatched.wait(), timeout=5)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    release.set()

    record = None
    for _ in range(200):
        record = await claim_repository.get_claim(_key())
        if record and record.state == ClaimState.COMMITTED:
            break
        await asyncio.sleep(0.01)
    assert record.state == ClaimState.COMMITTED
    assert record.transaction_hash == TX_HASH


async def test_orphaned_reservation_heals_after_timeout(
    claim_repository, chain_repository, clock
):
    # A process that died between reserve and resolve leaves this behind
    orphan = ClaimRecord(
        key=_key(),
        attempt_id=uuid7(),
        network=settings.TESTNET_NAME,
        amount=Decimal(settings.CLAIM_AMOUNT),
        contract_address="",
        state=ClaimState.RESERVED,
    )
    assert await claim_repository.try_reserve(orphan)

    with pytest.raises(error_responses.AlreadyClaimedError):
        await claim_use_case.execute(_request(), claim_repository, chain_repository)
    chain_repository.send_transaction.assert_not_called()

    clock.advance(claim_repository.reservation_timeout + timedelta(seconds=1))

    result = await claim_use_case.execute(_request(), claim_repository, chain_repository)
    assert result.transaction_hash == TX_HASH
    record = await claim_repository.get_claim(_key())
    assert record.attempt_id != orphan.attempt_id
    assert record.state == ClaimState.COMMITTED


async def test_cancelled_request_failing_dispatch_still_rolls_back(
    claim_repository, chain_repository
):
    release = asyncio.Event()
    dispatched = asyncio.Event()

    async def failing_send(*args, **kwargs):
        dispatched.set()
        await release.wait()
        return ChainDispatchResult(
            error_kind=ChainErrorKind.FAILED, code=5000, message="nonce too low"
        )

    chain_repository.send_transaction.side_effect = failing_send

    with patch.object(claim_use_case, "logger") as mock_logger:
        task = asyncio.create_task(
            claim_use_case.execute(_request(), claim_repository, chain_repository)
        )
        await asyncio.wait_for(dispatched.wait(), timeout=5)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        release.set()

        for _ in range(200):
            if mock_logger.debug.called:
                break
            await asyncio.sleep(0.01)

    assert "DispatchFailureError" in mock_logger.debug.call_args.args[0]
    assert await claim_repository.is_eligible(_key())


async def test_pre_check_does_not_touch_records(claim_repository, chain_repository):
    await pre_check_use_case.execute(
        settings.TESTNET_NAME, ADDRESS, claim_repository, chain_repository
    )
    assert await claim_repository.get_claim(_key()) is None

    await claim_use_case.execute(_request(), claim_repository, chain_repository)
    before = await claim_repository.get_claim(_key())
    with pytest.raises(error_responses.AlreadyClaimedError):
        await pre_check_use_case.execute(
            settings.TESTNET_NAME, ADDRESS, claim_repository, chain_repository
        )
    assert await claim_repository.get_claim(_key()) == before
