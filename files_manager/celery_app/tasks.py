import logging

from files_manager.celery_app.config import celery_app
from files_manager.database import SessionLocal
from files_manager.services.thumbnails import process_thumbnail_job

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="files_manager.generate_thumbnails")
def generate_thumbnails(self, job: dict, db=None):
    owns_session = db is None
    if owns_session:
        db = SessionLocal()
    try:
        record = process_thumbnail_job(job, db)
        return {"fileId": record.id, "thumbnailStatus": record.thumbnail_status}
    except Exception as e:
        logger.error("Thumbnail job %s failed: %s", self.request.id, e)
        raise
    finally:
        if owns_session:
            db.close()
