import asyncio
from typing import Awaitable
from typing import Callable

import settings
from testnetfaucet import api_logger
from testnetfaucet import dependencies
from testnetfaucet.crons import expired_claims_job
from testnetfaucet.repository import connection

logger = api_logger.get()


async def start_cron_jobs():
    connection.init_defaults()
    dependencies.init_globals()

    tasks = []
    if settings.RUN_CRON_JOBS:
        tasks.append(
            (
                _run_expired_claims_job,
                "Expired claims cleanup",
                settings.EXPIRED_CLAIMS_JOB_TIMEOUT_BETWEEN_RUNS_SECONDS,
            )
        )
    else:
        logger.info("RUN_CRON_JOBS is not set, no cron jobs to run")

    await asyncio.gather(*[_cron_runner(*t) for t in tasks])
    await connection.close_all()
    logger.info("Cron jobs done")


async def _cron_runner(
    job_callback: Callable[..., Awaitable[None]], job_name: str, timeout: int, *args
):
    while True:
        try:
            logger.debug(f"Started {job_name} job")
            await job_callback(*args)
            logger.debug(f"Finished {job_name} job, restarting in {timeout} seconds")
            await asyncio.sleep(timeout)
        except Exception:
            logger.error(f"{job_name} job failed, restarting", exc_info=True)
            await asyncio.sleep(timeout)


async def _run_expired_claims_job():
    await expired_claims_job.execute(dependencies.get_claim_repository())


if __name__ == "__main__":
    asyncio.run(start_cron_jobs())
