# Transcoding service - FFmpeg/FFprobe operations, multi-rendition HLS command building

import asyncio
import json
import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from eventhub.core.config import settings
from eventhub.core.exceptions import ProbeFailure
from eventhub.services.quality import VideoQuality

logger = logging.getLogger(__name__)

MASTER_PLAYLIST = "index.m3u8"
RENDITION_PLAYLIST = "index-%v.m3u8"


def _find_binary(name: str, configured: Optional[str]) -> str:
    """Resolve a binary: explicit setting first, then common install locations and PATH"""
    if configured:
        return configured
    for path in [f"/usr/bin/{name}", f"/usr/local/bin/{name}"]:
        if os.path.isfile(path) and os.access(path, os.X_OK):
            return path
    found = shutil.which(name)
    if found:
        return found
    raise RuntimeError(f"{name} not found. Please install FFmpeg or set {name.upper()}_PATH.")


def parse_duration(probe_output: str) -> Optional[float]:
    """
    Extract the container duration from `ffprobe -print_format json` output

    Returns:
        Duration in seconds, or None if ffprobe reported none
    """
    data = json.loads(probe_output)
    duration = data.get("format", {}).get("duration")
    if duration in (None, "", "N/A"):
        return None
    try:
        value = float(duration)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def rendition_paths(output_dir: str, count: int) -> List[str]:
    """Master playlist followed by one playlist per rendition"""
    out = Path(output_dir)
    return [str(out / MASTER_PLAYLIST)] + [str(out / f"index-{i}.m3u8") for i in range(count)]


class TranscodeService:
    """Service for video transcoding operations using FFmpeg"""

    def __init__(
        self,
        ffmpeg_path: Optional[str] = None,
        ffprobe_path: Optional[str] = None,
        timeout: Optional[int] = None,
        segment_duration: Optional[int] = None,
    ):
        self._ffmpeg_path = ffmpeg_path or settings.ffmpeg_path
        self._ffprobe_path = ffprobe_path or settings.ffprobe_path
        self.timeout = timeout or settings.ffmpeg_timeout
        self.segment_duration = segment_duration or settings.hls_segment_duration
        self._resolved = {}

    @property
    def ffmpeg_path(self) -> str:
        if "ffmpeg" not in self._resolved:
            self._resolved["ffmpeg"] = _find_binary("ffmpeg", self._ffmpeg_path)
        return self._resolved["ffmpeg"]

    @property
    def ffprobe_path(self) -> str:
        if "ffprobe" not in self._resolved:
            self._resolved["ffprobe"] = _find_binary("ffprobe", self._ffprobe_path)
        return self._resolved["ffprobe"]

    def is_available(self) -> bool:
        """True if both binaries resolve to executables"""
        try:
            return all(shutil.which(path) for path in (self.ffmpeg_path, self.ffprobe_path))
        except RuntimeError:
            return False

    async def probe_duration(self, input_path: str) -> Optional[float]:
        """
        Get the duration of a media file using FFprobe

        Returns:
            Duration in seconds or None if the container does not declare one

        Raises:
            ProbeFailure: unreadable=True if ffprobe could not open the file at all
        """
        cmd = [
            self.ffprobe_path,
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            input_path,
        ]

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            raise ProbeFailure(input_path, f"Cannot start ffprobe: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=30)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise ProbeFailure(input_path, "ffprobe timed out")

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="ignore").strip()
            raise ProbeFailure(input_path, message or f"exit code {process.returncode}", unreadable=True)

        try:
            return parse_duration(stdout.decode("utf-8", errors="ignore"))
        except json.JSONDecodeError as e:
            raise ProbeFailure(input_path, f"Failed to parse FFprobe output: {e}")

    def build_hls_command(
        self,
        input_path: str,
        output_dir: str,
        qualities: Sequence[VideoQuality],
        duration: Optional[float] = None,
    ) -> List[str]:
        """
        Build one ffmpeg invocation producing an HLS stream per quality plus a
        master playlist referencing all of them.

        Every rendition maps the first video and first audio stream of the input
        and gets its own scale filter, bitrate cap and audio parameters.

        Args:
            input_path: Path to input video file
            output_dir: Directory receiving index.m3u8 and index-<n>.m3u8
            qualities: The quality ladder, one rendition per entry
            duration: Input duration in seconds; without it encoding stops at the shortest stream
        """
        if not qualities:
            raise ValueError("At least one quality is required")

        cmd = [self.ffmpeg_path, "-y", "-i", input_path]

        for _ in qualities:
            cmd += ["-map", "0:v:0", "-map", "0:a:0"]

        cmd += ["-c:v", "libx264", "-c:a", "aac"]

        stream_map = []
        for index, quality in enumerate(qualities):
            cmd += [
                f"-filter:v:{index}", f"scale=w={quality.width}:h={quality.height}",
                f"-maxrate:v:{index}", f"{quality.video_bitrate}k",
                f"-bufsize:v:{index}", f"{quality.video_bufsize}k",
                f"-b:a:{index}", f"{quality.audio_bitrate}k",
                f"-ar:a:{index}", str(quality.audio_samplerate),
                f"-ac:a:{index}", str(quality.audio_channels),
            ]
            stream_map.append(f"v:{index},a:{index}")

        cmd += ["-var_stream_map", " ".join(stream_map)]
        cmd += ["-t", f"{duration:.3f}"] if duration else ["-shortest"]
        cmd += [
            "-f", "hls",
            "-hls_time", str(self.segment_duration),
            "-hls_list_size", "0",
            "-master_pl_name", MASTER_PLAYLIST,
            str(Path(output_dir) / RENDITION_PLAYLIST),
        ]
        return cmd

    async def run(self, cmd: List[str]):
        """
        Run an ffmpeg command to completion

        Raises:
            RuntimeError: on non-zero exit or when the configured timeout is exceeded
        """
        logger.info(f"Starting ffmpeg: {' '.join(cmd)}")
        process = await asyncio.create_subprocess_exec(
            *cmd, stdout=asyncio.subprocess.DEVNULL, stderr=asyncio.subprocess.PIPE
        )
        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise RuntimeError(f"FFmpeg timed out after {self.timeout}s")

        if process.returncode != 0:
            # The last lines carry the actual error, the rest is the banner
            tail = stderr.decode("utf-8", errors="ignore").strip().splitlines()[-10:]
            raise RuntimeError(f"FFmpeg failed with code {process.returncode}: {' '.join(tail)}")


# Global service instance
transcode_service = TranscodeService()
