import os

from prometheus_client import multiprocess

bind = f"0.0.0.0:{os.getenv('API_PORT', '5000')}"
# Every worker admits ADMISSION_CEILING_PER_SECOND // workers, see app.py
workers = int(os.getenv("GUNICORN_WORKERS", "1"))
worker_class = "uvicorn.workers.UvicornWorker"
graceful_timeout = int(os.getenv("CHAIN_API_TIMEOUT_SECONDS", "30"))


# needed for prometheus multiprocessing metrics when gunicorn is used
# https://github.com/prometheus/client_python#multiprocess-mode-eg-gunicorn
def child_exit(server, worker):
    multiprocess.mark_process_dead(worker.pid)
