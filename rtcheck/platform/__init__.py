"""Platform abstraction layer."""

from .detection import (
    LinuxDistro,
    Platform,
    PlatformInfo,
    detect,
    detect_linux_distro,
    detect_platform,
)
from .process import (
    Command,
    CommandOptions,
    CommandResult,
    ExitStatus,
    Failed,
    LaunchFailed,
    Succeeded,
    TimedOut,
    describe_failure,
    run_command,
    shellify,
)

__all__ = [
    # detection
    "LinuxDistro",
    "Platform",
    "PlatformInfo",
    "detect",
    "detect_linux_distro",
    "detect_platform",
    # process
    "Command",
    "CommandOptions",
    "CommandResult",
    "ExitStatus",
    "Failed",
    "LaunchFailed",
    "Succeeded",
    "TimedOut",
    "describe_failure",
    "run_command",
    "shellify",
]
