import asyncio
from decimal import Decimal
from typing import Dict
from typing import Optional
from urllib.parse import urljoin

import aiohttp

from testnetfaucet import api_logger
from testnetfaucet.domain.faucet.entities import ChainDispatchResult
from testnetfaucet.domain.faucet.entities import ChainErrorKind
from testnetfaucet.utils.timer import async_timer

logger = api_logger.get()

SUCCESS_CODE = 0


class ChainApiRepository:
    """
    Client for the chain transaction service, which holds the faucet wallet,
    builds, signs and broadcasts transactions.
    Every outcome comes back as a ChainDispatchResult, nothing is raised.
    """

    def __init__(
        self,
        api_base_url: str,
        api_key: str,
        timeout_seconds: int,
        address_locked_message: str,
    ):
        self.api_base_url = api_base_url
        self.api_key = api_key
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.address_locked_message = address_locked_message
        self._session: Optional[aiohttp.ClientSession] = None

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    @async_timer("chain_api_repository.send_transaction", logger=logger)
    async def send_transaction(
        self,
        network: str,
        address: str,
        amount: Decimal,
        tweet_url: Optional[str] = None,
    ) -> ChainDispatchResult:
        request = {
            "net": network,
            "address": address,
            "amount": str(amount),
            "tweetUrl": tweet_url or "",
        }
        return await self._post("v1/transactions", request)

    @async_timer("chain_api_repository.pre_check", logger=logger)
    async def pre_check(self, network: str, address: str) -> ChainDispatchResult:
        return await self._post("v1/preCheck", {"net": network, "address": address})

    async def _post(self, path: str, request: Dict) -> ChainDispatchResult:
        try:
            session = self._get_session()
            async with session.post(
                urljoin(self.api_base_url, path),
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=request,
            ) as response:
                response_json = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Chain API request to {path} failed", exc_info=True)
            return ChainDispatchResult(
                error_kind=ChainErrorKind.UNAVAILABLE,
                message=f"chain service unavailable: {type(e).__name__}",
            )
        return self._to_result(response_json)

    def _to_result(self, response_json) -> ChainDispatchResult:
        if not isinstance(response_json, dict):
            return ChainDispatchResult(
                error_kind=ChainErrorKind.FAILED,
                message="unexpected chain service response",
            )
        code = response_json.get("code")
        message = response_json.get("message") or ""
        if code == SUCCESS_CODE:
            data = response_json.get("data")
            return ChainDispatchResult(
                transaction_hash=str(data) if data is not None else None,
                code=code,
                message=message,
            )
        error_kind = ChainErrorKind.FAILED
        if message == self.address_locked_message:
            error_kind = ChainErrorKind.ADDRESS_LOCKED
        return ChainDispatchResult(
            error_kind=error_kind,
            code=code if isinstance(code, int) else None,
            message=message,
        )

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session
