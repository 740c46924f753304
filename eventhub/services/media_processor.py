# Media processing - turns uploaded clips and images into distributable renditions

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from eventhub.core.config import settings
from eventhub.core.exceptions import JobFailure, ProbeFailure
from eventhub.services import image_service
from eventhub.services.processing_queue import ProcessingJob, ProcessingQueue
from eventhub.services.quality import QUALITIES, ImageQuality, VideoQuality
from eventhub.services.transcode_service import TranscodeService, transcode_service

logger = logging.getLogger(__name__)


class MediaProcessor:
    """
    Processes uploaded media through two independent queues.

    The video queue serializes whole clip uploads (one ffmpeg invocation per
    clip). The image queue runs one job per image quality, so variants of one
    image are separate units of failure.
    """

    def __init__(
        self,
        transcoder: Optional[TranscodeService] = None,
        video_concurrency: Optional[int] = None,
        image_concurrency: Optional[int] = None,
    ):
        self.transcoder = transcoder or transcode_service
        self.video_queue = ProcessingQueue(
            concurrency=video_concurrency or settings.video_queue_concurrency, name="video"
        )
        self.image_queue = ProcessingQueue(
            concurrency=image_concurrency or settings.image_queue_concurrency, name="image"
        )

    async def process(self, media_type: str, id: str, input_path: str, output_dir: str):
        """Process an upload with the quality ladder of its media type"""
        if media_type == "video":
            await self.process_video(id, input_path, output_dir, QUALITIES["video"])
        elif media_type == "image":
            await self.process_image(id, input_path, output_dir, QUALITIES["image"])
        else:
            raise ValueError(f"unknown media type: {media_type}")

    async def process_avatar(self, id: str, input_path: str, output_dir: str):
        await self.process_image(id, input_path, output_dir, QUALITIES["avatar"])

    async def process_video(
        self, id: str, input_path: str, output_dir: str, qualities: Sequence[VideoQuality]
    ):
        """
        Transcode a clip into one HLS stream per quality plus a master playlist.

        The whole multi-rendition ffmpeg invocation is a single job on the video queue.

        Args:
            id: Id of the media the clip belongs to
            input_path: Path of the uploaded clip
            output_dir: Existing directory receiving index.m3u8 and index-<n>.m3u8
            qualities: The quality ladder

        Raises:
            JobFailure: if the input is unreadable or ffmpeg fails
        """
        try:
            duration = await self.transcoder.probe_duration(input_path)
        except ProbeFailure as e:
            if e.unreadable:
                raise JobFailure(id, f"Cannot read {input_path}") from e
            logger.warning(f"Probe of {input_path} failed, encoding until shortest stream ends: {e}")
            duration = None

        cmd = self.transcoder.build_hls_command(input_path, output_dir, qualities, duration)

        async def run():
            await self.transcoder.run(cmd)

        await self.video_queue.submit(ProcessingJob(id=id, run=run))
        logger.info(f"Clip {id} transcoded into {len(qualities)} renditions")

    async def process_image(
        self, id: str, input_path: str, output_dir: str, qualities: Sequence[ImageQuality]
    ):
        """
        Resize an image once per quality into <output_dir>/<quality name>.jpg.

        Images tagged with a portrait EXIF orientation get width and height swapped.

        Raises:
            JobFailure: for the first quality that failed, after all of them settled
        """
        try:
            orientation = await asyncio.to_thread(image_service.read_orientation, input_path)
        except Exception as e:
            raise JobFailure(id, f"Cannot read {input_path}") from e

        portrait = image_service.is_portrait_orientation(orientation)

        futures = []
        for quality in qualities:
            width, height = (quality.height, quality.width) if portrait else (quality.width, quality.height)
            output_path = str(Path(output_dir) / f"{quality.name}.jpg")
            futures.append(self.image_queue.submit(ProcessingJob(
                id=f"{id}:{quality.name}",
                run=self._resize_job(input_path, output_path, width, height, quality.fit),
            )))

        results = await asyncio.gather(*futures, return_exceptions=True)
        failures: List[BaseException] = [r for r in results if isinstance(r, BaseException)]
        if failures:
            raise failures[0]

    @staticmethod
    def _resize_job(input_path: str, output_path: str, width: int, height: int, fit: str):
        async def run():
            await asyncio.to_thread(image_service.resize_image, input_path, output_path, width, height, fit)
        return run

    def stats(self) -> dict:
        return {
            "video": self.video_queue.stats(),
            "image": self.image_queue.stats(),
        }


# Global processor instance shared by the upload routes
media_processor = MediaProcessor()
