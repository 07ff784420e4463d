"""Per-request temporary files for uploaded logos and generated invoices."""

from __future__ import annotations

import logging
import os
import random
import time
from typing import Callable, Iterable, Optional

from .errors import ResourceError

logger = logging.getLogger(__name__)

NameGenerator = Callable[[], str]


class TempFileNamer:
    """Produces ``<epoch-ms>-<random>`` tokens for temporary file names."""

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._clock = clock
        self._random = rng or random.SystemRandom()

    def __call__(self) -> str:
        millis = int(self._clock() * 1000)
        return f"{millis}-{self._random.randint(0, 10**9)}"


def ensure_directories(paths: Iterable[str]) -> None:
    for path in paths:
        os.makedirs(path, exist_ok=True)


def discard_file(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    except OSError as exc:
        raise ResourceError(f"Could not remove {path}: {exc}") from exc


class RenderWorkspace:
    """Owns the temporary files of one render and removes them on exit.

    Cleanup runs on success and on every error path. Failures to delete are
    logged and never replace the exception (or result) of the render itself.
    """

    def __init__(self, upload_dir: str, output_dir: str, token: str) -> None:
        self.upload_dir = upload_dir
        self.output_dir = output_dir
        self.token = token
        self.logo_path: Optional[str] = None
        self.output_path = os.path.join(output_dir, f"Invoice_{token}.pdf")

    def save_logo(self, data: bytes, extension: str) -> str:
        path = os.path.join(self.upload_dir, f"{self.token}{extension}")
        self.logo_path = path
        with open(path, "wb") as handle:
            handle.write(data)
        return path

    def cleanup(self) -> None:
        for path in (self.logo_path, self.output_path):
            if not path:
                continue
            try:
                discard_file(path)
            except ResourceError as exc:
                logger.warning("Error cleaning up file: %s", exc)

    def __enter__(self) -> "RenderWorkspace":
        ensure_directories((self.upload_dir, self.output_dir))
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()
