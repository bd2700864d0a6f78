from fastapi import APIRouter, Depends

from testnetfaucet import api_logger
from testnetfaucet import dependencies
from testnetfaucet.repository.chain_api_repository import ChainApiRepository
from testnetfaucet.repository.claim_repository import ClaimRepository
from testnetfaucet.service.faucet import claim_service
from testnetfaucet.service.faucet import pre_check_service
from testnetfaucet.service.faucet.entities import DirectClaimRequestModel
from testnetfaucet.service.faucet.entities import FaucetResponseModel
from testnetfaucet.service.faucet.entities import PreCheckRequestModel
from testnetfaucet.service.faucet.entities import TweetClaimRequestModel

TAG = "Faucet"
router = APIRouter(
    prefix="/faucet",
)
router.tags = [TAG]

logger = api_logger.get()


@router.post(
    "/directClaim",
    name="Direct claim",
    description="Send the fixed claim amount to the address, once per address per day.",
    response_model=FaucetResponseModel,
)
async def direct_claim(
    request: DirectClaimRequestModel,
    claim_repository: ClaimRepository = Depends(dependencies.get_claim_repository),
    chain_repository: ChainApiRepository = Depends(
        dependencies.get_chain_api_repository
    ),
) -> FaucetResponseModel:
    return await claim_service.direct_claim(
        request,
        claim_repository,
        chain_repository,
    )


@router.post(
    "/tweetClaim",
    name="Tweet claim",
    description="Send the larger tweet claim amount to the address for a post linking the faucet.",
    response_model=FaucetResponseModel,
)
async def tweet_claim(
    request: TweetClaimRequestModel,
    claim_repository: ClaimRepository = Depends(dependencies.get_claim_repository),
    chain_repository: ChainApiRepository = Depends(
        dependencies.get_chain_api_repository
    ),
) -> FaucetResponseModel:
    return await claim_service.tweet_claim(
        request,
        claim_repository,
        chain_repository,
    )


@router.post(
    "/preCheck",
    name="Pre-check",
    description="Check whether the address could claim right now. Sends nothing.",
    response_model=FaucetResponseModel,
)
async def pre_check(
    request: PreCheckRequestModel,
    claim_repository: ClaimRepository = Depends(dependencies.get_claim_repository),
    chain_repository: ChainApiRepository = Depends(
        dependencies.get_chain_api_repository
    ),
) -> FaucetResponseModel:
    return await pre_check_service.execute(
        request,
        claim_repository,
        chain_repository,
    )
