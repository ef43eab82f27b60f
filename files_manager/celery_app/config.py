import logging

from celery import Celery
from celery.signals import worker_init

from files_manager.config import REDIS_URL, configure_logging
from files_manager.database import db, init_db

logger = logging.getLogger(__name__)

celery_app = Celery(
    "files_manager",
    broker=REDIS_URL,
    backend=REDIS_URL,
    include=["files_manager.celery_app.tasks"],
)

celery_app.conf.update(
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
)


@worker_init.connect
def setup_worker(**kwargs):
    configure_logging()
    init_db()
    # children of the prefork pool must not share the parent's connections
    db.dispose()
    logger.info("Thumbnail worker started")
