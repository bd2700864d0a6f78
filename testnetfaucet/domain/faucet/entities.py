from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

NATIVE_TOKEN = "native"


class ClaimState(Enum):
    RESERVED = "RESERVED"
    COMMITTED = "COMMITTED"


class ClaimVariant(Enum):
    DIRECT = "direct"
    TWEET = "tweet"


class ChainErrorKind(Enum):
    # Chain service reports the address as locked or already pending
    ADDRESS_LOCKED = "ADDRESS_LOCKED"
    FAILED = "FAILED"
    # Transport fault or timeout talking to the chain service
    UNAVAILABLE = "UNAVAILABLE"


@dataclass(frozen=True)
class ClaimKey:
    address: str
    asset: str
    network: str

    @classmethod
    def create(
        cls, address: str, network: str, contract_address: str = ""
    ) -> "ClaimKey":
        """Build the canonical key, differently cased inputs map to the same key."""
        asset = contract_address.lower() if contract_address else NATIVE_TOKEN
        return cls(address=address.lower(), asset=asset, network=network.lower())


@dataclass
class ClaimRecord:
    key: ClaimKey
    attempt_id: UUID
    network: str
    amount: Decimal
    contract_address: str
    state: ClaimState
    reserved_at: Optional[datetime] = None
    transaction_hash: Optional[str] = None
    committed_at: Optional[datetime] = None


@dataclass
class ClaimRequest:
    variant: ClaimVariant
    network: str
    address: str
    tweet_url: Optional[str] = None


@dataclass
class ClaimResult:
    transaction_hash: str
    amount: Decimal


@dataclass
class PreCheckResult:
    passed: bool
    message: str


@dataclass
class ChainDispatchResult:
    transaction_hash: Optional[str] = None
    error_kind: Optional[ChainErrorKind] = None
    code: Optional[int] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.error_kind is None and bool(self.transaction_hash)
