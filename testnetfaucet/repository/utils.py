from datetime import datetime
from datetime import timezone
from typing import Dict

from testnetfaucet.domain.faucet.entities import ClaimKey


# Stored timestamps are naive UTC
def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def key_params(key: ClaimKey) -> Dict[str, str]:
    """Bind parameters that select the single row of a ClaimKey."""
    return {
        "address": key.address,
        "asset": key.asset,
        "network": key.network,
    }
