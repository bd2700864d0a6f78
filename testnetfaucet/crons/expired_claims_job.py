from testnetfaucet import api_logger
from testnetfaucet.repository.claim_repository import ClaimRepository

logger = api_logger.get()


async def execute(claim_repository: ClaimRepository) -> int:
    """Purges rows that no longer block their address. Eligibility never depends on it."""
    deleted_count = await claim_repository.delete_expired()
    if deleted_count:
        logger.info(f"Deleted {deleted_count} expired faucet claims")
    return deleted_count
