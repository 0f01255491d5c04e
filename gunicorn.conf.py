from id_analysis_service.settings import settings
from id_analysis_service.utils.utils import setup_logging

bind = f"0.0.0.0:{settings.PORT}"
workers = settings.ID_ANALYSIS_WEB_WORKERS
worker_class = "uvicorn.workers.UvicornWorker"

# analysis requests wait on the service for as long as it takes
timeout = 0

log = setup_logging(component_name="gunicorn", log_level=settings.LOG_LEVEL)


def post_fork(server, worker):
    log.info(f"worker spawned, pid: {worker.pid}")


def worker_exit(server, worker):
    log.info(f"worker exited, pid: {worker.pid}")
