import os
from unittest.mock import Mock

import pytest
from PIL import Image

from files_manager.celery_app.queue import ThumbnailQueue
from files_manager.celery_app.tasks import generate_thumbnails
from files_manager.exceptions import ThumbnailJobError
from files_manager.models.file_model import File
from files_manager.services.storage import LocalStorage
from files_manager.services.thumbnails import THUMBNAIL_WIDTHS, process_thumbnail_job, thumbnail_path
from files_manager.tests.conftest import basic_auth, make_png


@pytest.fixture
def image_record(db, storage_root):
    local_path = LocalStorage(str(storage_root)).save(make_png(1000, 500))
    record = File(user_id=1, name="img.png", type="image", parent_id=0,
                  local_path=local_path, thumbnail_status="pending")
    db.add(record)
    db.commit()
    return record


def test_generates_every_width(db, image_record):
    record = process_thumbnail_job({"fileId": image_record.id, "userId": 1}, db)

    assert record.thumbnail_status == "ready"
    for width in THUMBNAIL_WIDTHS:
        with Image.open(thumbnail_path(image_record.local_path, width)) as thumb:
            assert thumb.size == (width, width // 2)
            assert thumb.format == "PNG"


def test_rerun_overwrites_thumbnails(db, image_record):
    process_thumbnail_job({"fileId": image_record.id, "userId": 1}, db)
    process_thumbnail_job({"fileId": image_record.id, "userId": 1}, db)

    folder = os.path.dirname(image_record.local_path)
    assert len(os.listdir(folder)) == 1 + len(THUMBNAIL_WIDTHS)


@pytest.mark.parametrize("job, message", [
    ({"userId": 1}, "Missing fileId"),
    ({"fileId": 1}, "Missing userId"),
    ({"fileId": 1, "userId": 2}, "File not found"),
    ({"fileId": 42, "userId": 1}, "File not found"),
])
def test_invalid_jobs(db, image_record, job, message):
    with pytest.raises(ThumbnailJobError, match=message):
        process_thumbnail_job(job, db)

    for width in THUMBNAIL_WIDTHS:
        assert not os.path.exists(thumbnail_path(image_record.local_path, width))
    db.refresh(image_record)
    assert image_record.thumbnail_status == "pending"


def test_unreadable_image_marks_failed(db, storage_root):
    local_path = LocalStorage(str(storage_root)).save(b"not an image")
    record = File(user_id=1, name="broken.png", type="image", parent_id=0,
                  local_path=local_path, thumbnail_status="pending")
    db.add(record)
    db.commit()

    with pytest.raises(Exception):
        process_thumbnail_job({"fileId": record.id, "userId": 1}, db)

    db.refresh(record)
    assert record.thumbnail_status == "failed"


def test_celery_task_runs_pipeline(db, image_record):
    result = generate_thumbnails.run({"fileId": image_record.id, "userId": 1}, db=db)
    assert result == {"fileId": image_record.id, "thumbnailStatus": "ready"}


def test_celery_task_propagates_failure(db):
    with pytest.raises(ThumbnailJobError, match="File not found"):
        generate_thumbnails.run({"fileId": 5, "userId": 1}, db=db)


def test_queue_sends_job_payload():
    task = Mock()
    task.delay.return_value.id = "job-1"

    assert ThumbnailQueue(task).enqueue(3, 1) == "job-1"
    task.delay.assert_called_once_with({"fileId": 3, "userId": 1})


def test_upload_to_ready_scenario(client, queue, db, png_b64):
    response = client.post("/users", json={"email": "a@x.com", "password": "pw1"})
    assert response.status_code == 201
    user_id = response.json()["id"]

    response = client.get("/connect", headers=basic_auth("a@x.com", "pw1"))
    assert response.status_code == 200
    headers = {"X-Token": response.json()["token"]}

    response = client.post("/files", json={"name": "img.png", "type": "image", "data": png_b64}, headers=headers)
    assert response.status_code == 201
    record = response.json()
    assert record["thumbnailStatus"] == "pending"
    assert db.get(File, record["id"]).local_path

    file_id, owner_id = queue.enqueue.call_args.args
    assert (file_id, owner_id) == (record["id"], user_id)
    process_thumbnail_job({"fileId": file_id, "userId": owner_id}, db)

    response = client.get(f"/files/{record['id']}", headers=headers)
    assert response.json()["thumbnailStatus"] == "ready"

    for width in THUMBNAIL_WIDTHS:
        response = client.get(f"/files/{record['id']}/data", params={"size": width}, headers=headers)
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        with Image.open(thumbnail_path(db.get(File, record["id"]).local_path, width)) as thumb:
            assert thumb.width == width


@pytest.mark.parametrize("type_, payload", [("file", b"plain text"), ("folder", None)])
def test_non_image_job_leaves_record_untouched(client, auth_headers, db, storage_root, type_, payload):
    local_path = LocalStorage(str(storage_root)).save(payload) if payload else None
    record = File(user_id=1, name="notes.txt", type=type_, parent_id=0, local_path=local_path)
    db.add(record)
    db.commit()

    with pytest.raises(ThumbnailJobError, match="File not found"):
        process_thumbnail_job({"fileId": record.id, "userId": 1}, db)

    db.refresh(record)
    assert record.thumbnail_status is None
    assert "thumbnailStatus" not in client.get(f"/files/{record.id}", headers=auth_headers).json()
    if local_path:
        assert not os.path.exists(thumbnail_path(local_path, 100))


def test_thumbnails_share_original_file_mode(db, image_record):
    process_thumbnail_job({"fileId": image_record.id, "userId": 1}, db)

    original_mode = os.stat(image_record.local_path).st_mode & 0o777
    for width in THUMBNAIL_WIDTHS:
        assert os.stat(thumbnail_path(image_record.local_path, width)).st_mode & 0o777 == original_mode
