from testnetfaucet import api_logger
from testnetfaucet.domain.faucet import pre_check_use_case
from testnetfaucet.repository.chain_api_repository import ChainApiRepository
from testnetfaucet.repository.claim_repository import ClaimRepository
from testnetfaucet.service.faucet.claim_service import SUCCESS_CODE
from testnetfaucet.service.faucet.claim_service import SUCCESS_MESSAGE
from testnetfaucet.service.faucet.entities import FaucetResponseModel
from testnetfaucet.service.faucet.entities import PreCheckRequestModel
from testnetfaucet.utils.timer import async_timer

logger = api_logger.get()


@async_timer("pre_check_service.execute", logger=logger)
async def execute(
    request: PreCheckRequestModel,
    claim_repository: ClaimRepository,
    chain_repository: ChainApiRepository,
) -> FaucetResponseModel:
    result = await pre_check_use_case.execute(
        request.net,
        request.address,
        claim_repository,
        chain_repository,
    )
    return FaucetResponseModel(
        code=SUCCESS_CODE,
        message=SUCCESS_MESSAGE,
        data=result.message,
    )
