import logging

from files_manager.celery_app.tasks import generate_thumbnails

logger = logging.getLogger(__name__)


class ThumbnailQueue:
    """Sends thumbnail jobs to the Celery worker through the Redis broker."""

    def __init__(self, task=generate_thumbnails):
        self.task = task

    def enqueue(self, file_id: int, user_id: int) -> str:
        result = self.task.delay({"fileId": file_id, "userId": user_id})
        logger.debug("Queued thumbnail job %s for file %d", result.id, file_id)
        return result.id
