"""
Tests for ffmpeg command building and ffprobe output parsing.
"""
import json
import shutil

import pytest

from eventhub.core.exceptions import ProbeFailure
from eventhub.services.quality import QUALITIES, VIDEO_QUALITIES, VideoQuality
from eventhub.services.transcode_service import TranscodeService, parse_duration, rendition_paths


@pytest.fixture
def service():
    return TranscodeService(ffmpeg_path="ffmpeg", ffprobe_path="ffprobe", timeout=60, segment_duration=4)


def option(cmd, name):
    return cmd[cmd.index(name) + 1]


def test_video_bufsize_is_twice_the_bitrate():
    quality = VideoQuality(width=640, height=360, video_bitrate=800, audio_bitrate=96, audio_samplerate=48000, audio_channels=2)
    assert quality.video_bufsize == 1600
    assert all(q.video_bufsize == 2 * q.video_bitrate for q in VIDEO_QUALITIES)


def test_quality_ladders():
    assert [q.name for q in QUALITIES["image"]] == ["high", "medium", "low"]
    assert [q.fit for q in QUALITIES["avatar"]] == ["cover"]
    assert [q.height for q in QUALITIES["video"]] == [640, 854, 1280]


def test_hls_command_maps_every_rendition(service):
    cmd = service.build_hls_command("in.mp4", "/out", VIDEO_QUALITIES, duration=12.5)

    assert cmd[:4] == ["ffmpeg", "-y", "-i", "in.mp4"]
    assert cmd.count("-map") == 2 * len(VIDEO_QUALITIES)
    assert option(cmd, "-var_stream_map") == "v:0,a:0 v:1,a:1 v:2,a:2"

    assert option(cmd, "-filter:v:0") == "scale=w=360:h=640"
    assert option(cmd, "-maxrate:v:2") == "1500k"
    assert option(cmd, "-bufsize:v:2") == "3000k"
    assert option(cmd, "-b:a:1") == "32k"
    assert option(cmd, "-ar:a:1") == "44100"
    assert option(cmd, "-ac:a:2") == "2"

    assert option(cmd, "-t") == "12.500"
    assert "-shortest" not in cmd
    assert option(cmd, "-f") == "hls"
    assert option(cmd, "-hls_time") == "4"
    assert option(cmd, "-hls_list_size") == "0"
    assert option(cmd, "-master_pl_name") == "index.m3u8"
    assert cmd[-1] == "/out/index-%v.m3u8"


def test_hls_command_without_duration_uses_shortest(service):
    cmd = service.build_hls_command("in.mp4", "/out", VIDEO_QUALITIES[:1], duration=None)
    assert "-shortest" in cmd
    assert "-t" not in cmd


def test_hls_command_requires_qualities(service):
    with pytest.raises(ValueError):
        service.build_hls_command("in.mp4", "/out", [])


def test_rendition_paths():
    assert rendition_paths("/out", 2) == ["/out/index.m3u8", "/out/index-0.m3u8", "/out/index-1.m3u8"]


def test_parse_duration():
    assert parse_duration(json.dumps({"format": {"duration": "7.250000"}})) == 7.25
    assert parse_duration(json.dumps({"format": {"duration": "N/A"}})) is None
    assert parse_duration(json.dumps({"format": {}})) is None
    assert parse_duration(json.dumps({})) is None


@pytest.mark.asyncio
async def test_probe_of_missing_binary_is_probe_failure(tmp_path):
    service = TranscodeService(ffmpeg_path="ffmpeg", ffprobe_path=str(tmp_path / "no-ffprobe"))
    with pytest.raises(ProbeFailure) as exc_info:
        await service.probe_duration(str(tmp_path / "in.mp4"))
    assert not exc_info.value.unreadable


@pytest.mark.asyncio
@pytest.mark.skipif(shutil.which("ffprobe") is None, reason="ffprobe not installed")
async def test_probe_of_garbage_file_is_unreadable(tmp_path):
    garbage = tmp_path / "garbage.mp4"
    garbage.write_bytes(b"definitely not a video")

    service = TranscodeService(ffmpeg_path="ffmpeg", ffprobe_path=shutil.which("ffprobe"))
    with pytest.raises(ProbeFailure) as exc_info:
        await service.probe_duration(str(garbage))
    assert exc_info.value.unreadable
