# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Per-request deadline shared by every statement a request issues."""
import time


class Deadline:
    def __init__(self, seconds: float):
        self._expires = time.monotonic() + seconds

    def remaining(self) -> float:
        return self._expires - time.monotonic()
