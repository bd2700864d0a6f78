from typing import List

from fastapi import APIRouter

from testnetfaucet.routers.routes import faucet_router
from testnetfaucet.routers.routes import metrics_router

router = APIRouter()

routers_to_include: List[APIRouter] = [
    # This is the order they show up in openapi.json
    faucet_router.router,
    metrics_router.router,
]

for router_to_include in routers_to_include:
    router.include_router(router_to_include)
