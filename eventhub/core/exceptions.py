# Error taxonomy shared by the processing pipeline and the recommendation engine

from typing import Optional


class EventHubError(Exception):
    """Base class for all errors raised by the core components"""


class JobFailure(EventHubError):
    """
    A queued job's unit of work failed.

    The raw error raised by the job (ffmpeg exit status, decoder error, ...)
    is chained as ``__cause__``.
    """

    def __init__(self, job_id: str, message: Optional[str] = None):
        self.job_id = job_id
        super().__init__(message or f"Job {job_id} failed")


class ProbeFailure(EventHubError):
    """FFprobe could not extract metadata from an input file"""

    def __init__(self, path: str, message: str, unreadable: bool = False):
        self.path = path
        # True when the file could not be opened/decoded at all
        self.unreadable = unreadable
        super().__init__(f"Probe of {path} failed: {message}")


class InvalidArgument(EventHubError, ValueError):
    """A core operation was called with input it cannot work with"""
