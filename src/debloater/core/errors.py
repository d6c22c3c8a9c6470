"""Exception types shared across the application."""

from __future__ import annotations


class ControllerError(RuntimeError):
    """An event reached a state it cannot apply to.

    The event set is closed, so this only signals a programming error; the
    runtime treats it as fatal.
    """


class DeviceError(RuntimeError):
    """Talking to the phone failed (adb missing, no device, command error)."""
