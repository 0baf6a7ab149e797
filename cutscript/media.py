"""Media duration lookup via ffprobe."""

import math
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Protocol

from .errors import MediaUnavailable


class MediaEngine(Protocol):
    """Anything that can report the duration of a media file in seconds."""

    def get_duration(self, path: str) -> float:
        ...


def _find_bin(name: str) -> str:
    """Find a binary on PATH or common Homebrew locations."""
    found = shutil.which(name)
    if found:
        return found
    for candidate in [f"/opt/homebrew/bin/{name}", f"/usr/local/bin/{name}"]:
        if Path(candidate).exists():
            return candidate
    return name  # fall back to bare name; subprocess will raise FileNotFoundError


class FFprobeEngine:
    """
    Read durations with ffprobe.

    Relative paths resolve against base_dir (normally the script's
    directory). Durations are cached per (path, mtime) so re-evaluating an
    unchanged LOAD does not spawn ffprobe again.
    """

    def __init__(self, base_dir: Optional[str] = None, ffprobe: Optional[str] = None):
        self.base_dir = Path(base_dir) if base_dir else None
        self.ffprobe = ffprobe or os.environ.get("CUTSCRIPT_FFPROBE") or _find_bin("ffprobe")
        self._cache: dict[tuple[str, float], float] = {}

    def resolve(self, path: str) -> Path:
        p = Path(path).expanduser()
        if not p.is_absolute() and self.base_dir is not None:
            p = self.base_dir / p
        return p

    def get_duration(self, path: str) -> float:
        media = self.resolve(path)
        if not media.is_file():
            raise MediaUnavailable(f"media file not found: {media}")

        key = (str(media.resolve()), media.stat().st_mtime)
        if key in self._cache:
            return self._cache[key]

        cmd = [
            self.ffprobe,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(media),
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=30)
        except FileNotFoundError:
            raise MediaUnavailable(f"ffprobe not found (tried: {self.ffprobe})")
        except subprocess.TimeoutExpired:
            raise MediaUnavailable(f"ffprobe timed out on {media}")

        if result.returncode != 0:
            raise MediaUnavailable(f"ffprobe failed on {media}:\n{result.stderr.strip()}")

        try:
            duration = float(result.stdout.strip())
        except ValueError:
            raise MediaUnavailable(f"ffprobe reported no duration for {media}")
        if not math.isfinite(duration) or duration <= 0:
            raise MediaUnavailable(f"{media} has no playable duration")

        print(f"[media] {media.name}: {duration:.3f}s")
        self._cache[key] = duration
        return duration
