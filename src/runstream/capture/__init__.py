from .output_capture import (
    CaptureSession,
    OutputCapture,
    get_active_session,
)

__all__ = [
    "CaptureSession",
    "OutputCapture",
    "get_active_session",
]
