from decimal import Decimal
from unittest.mock import AsyncMock
from unittest.mock import patch

import pytest

from testnetfaucet.domain.faucet.entities import ClaimRequest
from testnetfaucet.domain.faucet.entities import ClaimResult
from testnetfaucet.domain.faucet.entities import ClaimVariant
from testnetfaucet.domain.faucet.entities import PreCheckResult
from testnetfaucet.repository.chain_api_repository import ChainApiRepository
from testnetfaucet.repository.claim_repository import ClaimRepository
from testnetfaucet.service import error_responses
from testnetfaucet.service.faucet import claim_service
from testnetfaucet.service.faucet import pre_check_service
from testnetfaucet.service.faucet.entities import DirectClaimRequestModel
from testnetfaucet.service.faucet.entities import PreCheckRequestModel
from testnetfaucet.service.faucet.entities import TweetClaimRequestModel

ADDRESS = "0xabcdef0123456789abcdef0123456789abcdef01"
TWEET_URL = "https://x.com/someone/status/1790000000000000000"
TX_HASH = "0x" + "ab" * 32


@pytest.fixture
def claim_repository():
    return AsyncMock(spec=ClaimRepository)


@pytest.fixture
def chain_repository():
    return AsyncMock(spec=ChainApiRepository)


@patch("testnetfaucet.domain.faucet.claim_use_case.execute")
async def test_direct_claim(mock_execute, claim_repository, chain_repository):
    mock_execute.return_value = ClaimResult(
        transaction_hash=TX_HASH, amount=Decimal("100")
    )

    response = await claim_service.direct_claim(
        DirectClaimRequestModel(net="aries", address=ADDRESS),
        claim_repository,
        chain_repository,
    )

    assert response.code == 0
    assert response.message == "success"
    assert response.data == TX_HASH
    mock_execute.assert_called_once_with(
        ClaimRequest(variant=ClaimVariant.DIRECT, network="aries", address=ADDRESS),
        claim_repository,
        chain_repository,
    )


@patch("testnetfaucet.domain.faucet.claim_use_case.execute")
async def test_tweet_claim(mock_execute, claim_repository, chain_repository):
    mock_execute.return_value = ClaimResult(
        transaction_hash=TX_HASH, amount=Decimal("500")
    )

    response = await claim_service.tweet_claim(
        TweetClaimRequestModel(net="aries", address=ADDRESS, tweetUrl=TWEET_URL),
        claim_repository,
        chain_repository,
    )

    assert response.data == TX_HASH
    mock_execute.assert_called_once_with(
        ClaimRequest(
            variant=ClaimVariant.TWEET,
            network="aries",
            address=ADDRESS,
            tweet_url=TWEET_URL,
        ),
        claim_repository,
        chain_repository,
    )


@patch("testnetfaucet.domain.faucet.claim_use_case.execute")
async def test_direct_claim_error_propagates(
    mock_execute, claim_repository, chain_repository
):
    mock_execute.side_effect = error_responses.AlreadyClaimedError()

    with pytest.raises(error_responses.AlreadyClaimedError):
        await claim_service.direct_claim(
            DirectClaimRequestModel(net="aries", address=ADDRESS),
            claim_repository,
            chain_repository,
        )


@patch("testnetfaucet.domain.faucet.pre_check_use_case.execute")
async def test_pre_check(mock_execute, claim_repository, chain_repository):
    mock_execute.return_value = PreCheckResult(passed=True, message="PreCheck Pass")

    response = await pre_check_service.execute(
        PreCheckRequestModel(net="aries", address=ADDRESS),
        claim_repository,
        chain_repository,
    )

    assert response.code == 0
    assert response.data == "PreCheck Pass"
    mock_execute.assert_called_once_with(
        "aries", ADDRESS, claim_repository, chain_repository
    )
