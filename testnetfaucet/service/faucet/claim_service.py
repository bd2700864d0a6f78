from testnetfaucet import api_logger
from testnetfaucet.domain.faucet import claim_use_case
from testnetfaucet.domain.faucet.entities import ClaimRequest
from testnetfaucet.domain.faucet.entities import ClaimVariant
from testnetfaucet.repository.chain_api_repository import ChainApiRepository
from testnetfaucet.repository.claim_repository import ClaimRepository
from testnetfaucet.service.faucet.entities import DirectClaimRequestModel
from testnetfaucet.service.faucet.entities import FaucetResponseModel
from testnetfaucet.service.faucet.entities import TweetClaimRequestModel
from testnetfaucet.utils.timer import async_timer

SUCCESS_CODE = 0
SUCCESS_MESSAGE = "success"

logger = api_logger.get()


@async_timer("claim_service.direct_claim", logger=logger)
async def direct_claim(
    request: DirectClaimRequestModel,
    claim_repository: ClaimRepository,
    chain_repository: ChainApiRepository,
) -> FaucetResponseModel:
    result = await claim_use_case.execute(
        ClaimRequest(
            variant=ClaimVariant.DIRECT,
            network=request.net,
            address=request.address,
        ),
        claim_repository,
        chain_repository,
    )
    return FaucetResponseModel(
        code=SUCCESS_CODE,
        message=SUCCESS_MESSAGE,
        data=result.transaction_hash,
    )


@async_timer("claim_service.tweet_claim", logger=logger)
async def tweet_claim(
    request: TweetClaimRequestModel,
    claim_repository: ClaimRepository,
    chain_repository: ChainApiRepository,
) -> FaucetResponseModel:
    result = await claim_use_case.execute(
        ClaimRequest(
            variant=ClaimVariant.TWEET,
            network=request.net,
            address=request.address,
            tweet_url=request.tweetUrl,
        ),
        claim_repository,
        chain_repository,
    )
    return FaucetResponseModel(
        code=SUCCESS_CODE,
        message=SUCCESS_MESSAGE,
        data=result.transaction_hash,
    )
