from datetime import datetime
from datetime import timedelta
from decimal import Decimal
from typing import Callable
from typing import Optional
from uuid import UUID

import sqlalchemy
from sqlalchemy import bindparam
from sqlalchemy.exc import SQLAlchemyError

from testnetfaucet import api_logger
from testnetfaucet.domain.faucet.entities import ClaimKey
from testnetfaucet.domain.faucet.entities import ClaimRecord
from testnetfaucet.domain.faucet.entities import ClaimState
from testnetfaucet.repository.connection import SessionProvider
from testnetfaucet.repository.utils import key_params
from testnetfaucet.repository.utils import utcnow
from testnetfaucet.utils.timer import async_timer

logger = api_logger.get()

# A row is "live" while it still blocks its key. Everything else is expired
# and may be overwritten by the next reservation.
SQL_LIVE_CONDITION = """(
    (faucet_claim.state = 'RESERVED' AND faucet_claim.reserved_at >= :reservation_cutoff)
    OR (faucet_claim.state = 'COMMITTED' AND faucet_claim.committed_at >= :committed_cutoff)
)"""

SQL_EXPIRED_CONDITION = """(
    (faucet_claim.state = 'RESERVED' AND faucet_claim.reserved_at < :reservation_cutoff)
    OR (faucet_claim.state = 'COMMITTED' AND faucet_claim.committed_at < :committed_cutoff)
)"""

# Single statement, the unique key on (address, asset, network) makes it
# atomic per key. An expired row is replaced in place, a live row is left
# alone and nothing is returned.
SQL_TRY_RESERVE = f"""
INSERT INTO faucet_claim (
    id,
    address,
    asset,
    network,
    amount,
    contract_address,
    state,
    transaction_hash,
    reserved_at,
    committed_at
) VALUES (
    :id,
    :address,
    :asset,
    :network,
    :amount,
    :contract_address,
    'RESERVED',
    NULL,
    :reserved_at,
    NULL
)
ON CONFLICT (address, asset, network) DO UPDATE SET
    id = excluded.id,
    amount = excluded.amount,
    contract_address = excluded.contract_address,
    state = excluded.state,
    transaction_hash = NULL,
    reserved_at = excluded.reserved_at,
    committed_at = NULL
WHERE {SQL_EXPIRED_CONDITION}
RETURNING id;
"""

SQL_COMMIT = """
UPDATE faucet_claim
SET
    state = 'COMMITTED',
    transaction_hash = :transaction_hash,
    committed_at = :committed_at
WHERE address = :address
AND asset = :asset
AND network = :network
AND id = :id
AND state = 'RESERVED'
RETURNING id;
"""

SQL_ROLLBACK = """
DELETE FROM faucet_claim
WHERE address = :address
AND asset = :asset
AND network = :network;
"""

SQL_GET_LIVE_CLAIM_ID = f"""
SELECT id
FROM faucet_claim
WHERE address = :address
AND asset = :asset
AND network = :network
AND {SQL_LIVE_CONDITION}
LIMIT 1;
"""

SQL_GET_CLAIM = """
SELECT
    id,
    address,
    asset,
    network,
    amount,
    contract_address,
    state,
    transaction_hash,
    reserved_at,
    committed_at
FROM faucet_claim
WHERE address = :address
AND asset = :asset
AND network = :network;
"""

SQL_DELETE_EXPIRED = f"""
DELETE FROM faucet_claim
WHERE {SQL_EXPIRED_CONDITION};
"""

_DATETIME_PARAMS = [
    "reserved_at",
    "committed_at",
    "reservation_cutoff",
    "committed_cutoff",
]


class ClaimStorageError(Exception):
    pass


class ClaimNotReservedError(Exception):
    pass


def _statement(sql: str) -> sqlalchemy.TextClause:
    statement = sqlalchemy.text(sql)
    params = [
        bindparam(name, type_=sqlalchemy.DateTime())
        for name in _DATETIME_PARAMS
        if f":{name}" in sql
    ]
    if params:
        statement = statement.bindparams(*params)
    return statement


class ClaimRepository:
    """Durable claim records, one row per ClaimKey.

    Expiry is evaluated lazily: a COMMITTED row stops counting once
    eligibility_window has passed since it was committed, a RESERVED row once
    reservation_timeout has passed since it was reserved.
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        session_provider: SessionProvider,
        session_provider_read: SessionProvider,
        eligibility_window: timedelta,
        reservation_timeout: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._session_provider = session_provider
        self._session_provider_read = session_provider_read
        self.eligibility_window = eligibility_window
        self.reservation_timeout = reservation_timeout
        self._clock = clock

    @async_timer("claim_repository.try_reserve", logger=logger)
    async def try_reserve(self, record: ClaimRecord) -> bool:
        """
        Insert a RESERVED record for record.key if the key holds no live record.
        :return: False if the key is already reserved or claimed
        """
        reserved_at = self._clock()
        data = {
            "id": str(record.attempt_id),
            **key_params(record.key),
            "amount": str(record.amount),
            "contract_address": record.contract_address,
            "reserved_at": reserved_at,
            **self._cutoffs(reserved_at),
        }
        try:
            async with self._session_provider.get() as session:
                result = await session.execute(_statement(SQL_TRY_RESERVE), data)
                row = result.first()
                await session.commit()
        except SQLAlchemyError as e:
            raise ClaimStorageError(f"Failed to reserve claim: {e}") from e
        if not row:
            return False
        record.state = ClaimState.RESERVED
        record.reserved_at = reserved_at
        return True

    @async_timer("claim_repository.commit", logger=logger)
    async def commit(
        self, key: ClaimKey, attempt_id: UUID, transaction_hash: str
    ) -> datetime:
        return await self._set_committed(key, attempt_id, transaction_hash)

    @async_timer("claim_repository.mark_consumed", logger=logger)
    async def mark_consumed(self, key: ClaimKey, attempt_id: UUID) -> datetime:
        """
        Commit the reservation without a transaction hash.
        The key then blocks for eligibility_window like a funded claim.
        """
        return await self._set_committed(key, attempt_id, None)

    async def _set_committed(
        self, key: ClaimKey, attempt_id: UUID, transaction_hash: Optional[str]
    ) -> datetime:
        committed_at = self._clock()
        data = {
            "id": str(attempt_id),
            **key_params(key),
            "transaction_hash": transaction_hash,
            "committed_at": committed_at,
        }
        try:
            async with self._session_provider.get() as session:
                result = await session.execute(_statement(SQL_COMMIT), data)
                row = result.first()
                await session.commit()
        except SQLAlchemyError as e:
            raise ClaimStorageError(f"Failed to commit claim: {e}") from e
        if not row:
            raise ClaimNotReservedError(
                f"No reservation {attempt_id} for {key.address} on {key.network}"
            )
        return committed_at

    @async_timer("claim_repository.rollback", logger=logger)
    async def rollback(self, key: ClaimKey) -> None:
        data = key_params(key)
        try:
            async with self._session_provider.get() as session:
                await session.execute(sqlalchemy.text(SQL_ROLLBACK), data)
                await session.commit()
        except SQLAlchemyError as e:
            raise ClaimStorageError(f"Failed to roll back claim: {e}") from e

    @async_timer("claim_repository.is_eligible", logger=logger)
    async def is_eligible(self, key: ClaimKey) -> bool:
        data = {
            **key_params(key),
            **self._cutoffs(self._clock()),
        }
        try:
            async with self._session_provider_read.get() as session:
                result = await session.execute(
                    _statement(SQL_GET_LIVE_CLAIM_ID), data
                )
                return result.first() is None
        except SQLAlchemyError as e:
            raise ClaimStorageError(f"Failed to check eligibility: {e}") from e

    @async_timer("claim_repository.get_claim", logger=logger)
    async def get_claim(self, key: ClaimKey) -> Optional[ClaimRecord]:
        """Raw record for the key, expired or not."""
        data = key_params(key)
        async with self._session_provider_read.get() as session:
            result = await session.execute(
                sqlalchemy.text(SQL_GET_CLAIM).columns(
                    reserved_at=sqlalchemy.DateTime(),
                    committed_at=sqlalchemy.DateTime(),
                ),
                data,
            )
            row = result.first()
            if row:
                return ClaimRecord(
                    key=ClaimKey(
                        address=row.address, asset=row.asset, network=row.network
                    ),
                    attempt_id=UUID(str(row.id)),
                    network=row.network,
                    amount=Decimal(row.amount),
                    contract_address=row.contract_address,
                    state=ClaimState(row.state),
                    reserved_at=row.reserved_at,
                    transaction_hash=row.transaction_hash,
                    committed_at=row.committed_at,
                )
            return None

    @async_timer("claim_repository.delete_expired", logger=logger)
    async def delete_expired(self) -> int:
        data = self._cutoffs(self._clock())
        async with self._session_provider.get() as session:
            result = await session.execute(_statement(SQL_DELETE_EXPIRED), data)
            await session.commit()
            return result.rowcount

    def _cutoffs(self, now: datetime) -> dict:
        return {
            "reservation_cutoff": now - self.reservation_timeout,
            "committed_cutoff": now - self.eligibility_window,
        }
