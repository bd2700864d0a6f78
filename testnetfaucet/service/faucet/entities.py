from typing import Optional

from pydantic import BaseModel, Field


class DirectClaimRequestModel(BaseModel):
    """Request model for a direct claim"""

    net: str = Field(
        description="Name of the test network, case insensitive",
    )
    address: str = Field(
        description="0x prefixed 20 byte hex address to receive tokens",
    )


class TweetClaimRequestModel(DirectClaimRequestModel):
    """Request model for a claim attributed to a social post"""

    tweetUrl: str = Field(
        description="Link to the post, https://x.com/<user>/status/<id>",
    )


class PreCheckRequestModel(DirectClaimRequestModel):
    """Request model for an eligibility pre-check"""


class FaucetResponseModel(BaseModel):
    """Response model shared by all faucet endpoints"""

    code: int = Field(
        description="0 on success, otherwise the error code",
    )
    message: str = Field(
        description="Human readable outcome",
    )
    data: Optional[str] = Field(
        default=None,
        description="Transaction hash for claims, pre-check message for pre-checks",
    )
