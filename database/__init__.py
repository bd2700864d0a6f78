from sqlalchemy import Column
from sqlalchemy import DateTime
from sqlalchemy import Index
from sqlalchemy import String
from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class FaucetClaim(Base):
    """One row per (address, asset, network), see ClaimRepository for the lifecycle."""

    __tablename__ = "faucet_claim"

    id = Column(String(36), primary_key=True, nullable=False)
    address = Column(String(42), nullable=False)
    # "native" or the lower cased token contract address
    asset = Column(String(42), nullable=False)
    network = Column(String(64), nullable=False)
    # Decimal string, token amounts can exceed float precision
    amount = Column(String(78), nullable=False)
    contract_address = Column(String(42), nullable=False, default="")
    state = Column(String(16), nullable=False)
    transaction_hash = Column(String(128), nullable=True)
    reserved_at = Column(DateTime, nullable=False)
    committed_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "address", "asset", "network", name="uq_faucet_claim_address_asset_network"
        ),
        Index("ix_faucet_claim_state_reserved_at", "state", "reserved_at"),
        Index("ix_faucet_claim_state_committed_at", "state", "committed_at"),
    )
