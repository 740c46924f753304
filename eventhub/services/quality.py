# Quality ladders - static rendition presets for clips, images and avatars

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Union

ImageQualityName = Literal["high", "medium", "low"]
ResizeFit = Literal["inside", "contain", "cover"]


@dataclass(frozen=True)
class VideoQuality:
    """One HLS rendition. Bitrates are in kbit/s."""

    width: int
    height: int
    video_bitrate: int
    audio_bitrate: int
    audio_samplerate: int
    audio_channels: int
    video_bufsize: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "video_bufsize", 2 * self.video_bitrate)


@dataclass(frozen=True)
class ImageQuality:
    """One still image rendition, written as <name>.jpg"""

    name: ImageQualityName
    width: int
    height: int
    fit: ResizeFit = "inside"


# Portrait clips (width < height)
VIDEO_QUALITIES: List[VideoQuality] = [
    VideoQuality(width=360, height=640, video_bitrate=600, audio_bitrate=32, audio_samplerate=44100, audio_channels=1),
    VideoQuality(width=480, height=854, video_bitrate=600, audio_bitrate=32, audio_samplerate=44100, audio_channels=1),
    VideoQuality(width=720, height=1280, video_bitrate=1500, audio_bitrate=64, audio_samplerate=44100, audio_channels=2),
]

IMAGE_QUALITIES: List[ImageQuality] = [
    ImageQuality(name="high", width=1080, height=1920, fit="inside"),
    ImageQuality(name="medium", width=720, height=1280, fit="inside"),
    ImageQuality(name="low", width=480, height=854, fit="inside"),
]

AVATAR_QUALITIES: List[ImageQuality] = [
    ImageQuality(name="high", width=512, height=512, fit="cover"),
]

QUALITIES: Dict[str, List[Union[VideoQuality, ImageQuality]]] = {
    "video": VIDEO_QUALITIES,
    "image": IMAGE_QUALITIES,
    "avatar": AVATAR_QUALITIES,
}
