"""Error hierarchy for bandlimit.

Every fatal condition of a resampling run is raised as a ResampleError
subclass and turned into an exit status by the CLI only.
"""


class ResampleError(Exception):
    """Base exception for a failed resampling run."""

    def __init__(self, message: str):
        super().__init__(message)


class UsageError(ResampleError):
    """Bad command line: wrong argument count or unusable rate."""


class AudioIOError(ResampleError):
    """Input or output file could not be opened, decoded or encoded."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class AllocationError(ResampleError):
    """A sample or filter buffer could not be allocated."""
