import os
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(".") / ".env"
load_dotenv(dotenv_path=env_path)

ENVIRONMENT = os.getenv("PLATFORM_ENVIRONMENT", "local")


def is_production():
    return ENVIRONMENT == "production"


def is_test():
    return ENVIRONMENT == "test"


APPLICATION_NAME = "TESTNET_FAUCET"
API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1")
API_PORT = int(os.getenv("API_PORT", 5000))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "logs/logs.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

DB_USER = os.getenv("DB_USER", "postgres")
DB_PASSWORD = os.getenv("DB_PASSWORD", "passw0rd")
DB_DATABASE = os.getenv("DB_DATABASE", "faucet")
DB_HOST = os.getenv("DB_HOST", "localhost")
DB_PORT = os.getenv("DB_PORT", "5432")

DB_USER_READ = os.getenv("DB_USER_READ", "postgres")
DB_PASSWORD_READ = os.getenv("DB_PASSWORD_READ", "passw0rd")
DB_DATABASE_READ = os.getenv("DB_DATABASE_READ", "faucet")
DB_HOST_READ = os.getenv("DB_HOST_READ", "localhost")
DB_PORT_READ = os.getenv("DB_PORT_READ", "5432")

# Full SQLAlchemy URLs, take precedence over the postgres parts above
DB_URL = os.getenv("DB_URL", None)
DB_URL_READ = os.getenv("DB_URL_READ", None)

# Faucet
TESTNET_NAME = os.getenv("TESTNET_NAME", "aries")
CLAIM_AMOUNT = os.getenv("CLAIM_AMOUNT", "100")
TWEET_CLAIM_AMOUNT = os.getenv("TWEET_CLAIM_AMOUNT", "500")
# One funded claim per address, asset and network inside this window
ELIGIBILITY_WINDOW_HOURS = int(os.getenv("ELIGIBILITY_WINDOW_HOURS", "24"))
# Unresolved reservations stop blocking the address after this
RESERVATION_TIMEOUT_SECONDS = int(os.getenv("RESERVATION_TIMEOUT_SECONDS", "300"))
ADMISSION_CEILING_PER_SECOND = int(os.getenv("ADMISSION_CEILING_PER_SECOND", "200"))
# Server processes, the admission ceiling is split evenly between them
GUNICORN_WORKERS = int(os.getenv("GUNICORN_WORKERS", "1"))

# Chain transaction service
CHAIN_API_BASE_URL = os.getenv("CHAIN_API_BASE_URL", "http://127.0.0.1:8881")
CHAIN_API_KEY = os.getenv("CHAIN_API_KEY", "")
CHAIN_API_TIMEOUT_SECONDS = int(os.getenv("CHAIN_API_TIMEOUT_SECONDS", "30"))
CHAIN_ADDRESS_LOCKED_MESSAGE = os.getenv(
    "CHAIN_ADDRESS_LOCKED_MESSAGE", "address is locked, please try again later"
)

# If it is False, the cron runner starts without jobs
RUN_CRON_JOBS = os.getenv("RUN_CRON_JOBS", "false").lower() == "true"
EXPIRED_CLAIMS_JOB_TIMEOUT_BETWEEN_RUNS_SECONDS = int(
    os.getenv("EXPIRED_CLAIMS_JOB_TIMEOUT_BETWEEN_RUNS_SECONDS", "3600")
)

# if prometheus py client will be used in multiprocessing mode, needs to point to an existing dir
PROMETHEUS_MULTIPROC_DIR = os.getenv("PROMETHEUS_MULTIPROC_DIR", None)
