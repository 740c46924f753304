# Media upload endpoints - store the raw upload, process renditions, flag media as available

from fastapi import APIRouter, UploadFile, File, Depends, HTTPException, Form
from sqlalchemy.orm import Session
from pathlib import Path
from typing import Optional
import logging
import shutil

from eventhub.core.config import settings
from eventhub.core.database import get_db
from eventhub.core.exceptions import JobFailure
from eventhub.models import Event, Media, User
from eventhub.services.media_processor import media_processor

router = APIRouter()
logger = logging.getLogger(__name__)


def _save_upload(file: UploadFile, destination: Path):
    destination.parent.mkdir(parents=True, exist_ok=True)
    with open(destination, "wb") as out:
        shutil.copyfileobj(file.file, out)


async def handle_media_upload(
    media_type: str,
    file: UploadFile,
    user_id: str,
    event_id: Optional[str],
    db: Session,
) -> dict:
    """
    Store an upload, process it and mark the resulting media as available.

    Clips and images belong to an event and get a Media record; avatars are
    keyed by the user id. If processing fails, the Media record and the
    output directory are removed again. The raw upload is always deleted.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    media = None
    if media_type != "avatar":
        if not event_id:
            raise HTTPException(status_code=400, detail="event_id is required")
        event = db.query(Event).filter(Event.id == event_id).first()
        if not event:
            raise HTTPException(status_code=404, detail=f"Event {event_id} not found")

        media = Media(type=media_type, user_id=user.id, event_id=event.id)
        db.add(media)
        db.commit()
        db.refresh(media)

    resource_id = media.id if media else user.id
    extension = Path(file.filename or "").suffix
    upload_path = Path(settings.media_upload_root) / f"{resource_id}{extension}"
    media_path = Path(settings.media_root) / media_type / resource_id

    logger.info(f"Processing {media_type} upload {resource_id} ({file.filename})")

    try:
        media_path.mkdir(parents=True, exist_ok=True)
        _save_upload(file, upload_path)

        if media_type == "avatar":
            await media_processor.process_avatar(resource_id, str(upload_path), str(media_path))
        else:
            await media_processor.process(media_type, resource_id, str(upload_path), str(media_path))

    except Exception as e:
        logger.error(f"Processing of {media_type} {resource_id} failed: {e}", exc_info=True)

        if media is not None:
            try:
                db.delete(media)
                db.commit()
            except Exception as db_error:
                db.rollback()
                logger.error(f"Failed to remove media {resource_id}: {db_error}")

        shutil.rmtree(media_path, ignore_errors=True)

        if isinstance(e, JobFailure):
            raise HTTPException(status_code=500, detail=f"Processing failed: {e}")
        raise HTTPException(status_code=500, detail=f"Upload failed: {e}")

    finally:
        try:
            upload_path.unlink(missing_ok=True)
        except OSError as cleanup_error:
            logger.error(f"Failed to remove {upload_path}: {cleanup_error}")

    if media is not None:
        media.file_available = True
        db.commit()
        db.refresh(media)

    logger.info(f"Media {resource_id} ({media_type}) now available")

    return {
        "success": True,
        "id": resource_id,
        "type": media_type,
        "event_id": media.event_id if media else None,
        "file_available": True,
    }


@router.post("/upload/clip")
async def upload_clip(
    file: UploadFile = File(...),
    user_id: str = Form(...),
    event_id: str = Form(...),
    db: Session = Depends(get_db),
):
    """Upload a clip and transcode it into HLS renditions"""
    return await handle_media_upload("video", file, user_id, event_id, db)


@router.post("/upload/image")
async def upload_image(
    file: UploadFile = File(...),
    user_id: str = Form(...),
    event_id: str = Form(...),
    db: Session = Depends(get_db),
):
    """Upload an image and resize it into high/medium/low variants"""
    return await handle_media_upload("image", file, user_id, event_id, db)


@router.post("/upload/avatar")
async def upload_avatar(
    file: UploadFile = File(...),
    user_id: str = Form(...),
    db: Session = Depends(get_db),
):
    return await handle_media_upload("avatar", file, user_id, None, db)
