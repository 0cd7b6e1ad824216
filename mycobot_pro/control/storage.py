"""
Recording persistence
JSON files holding {"metadata": {...}, "frames": [...]}
"""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union

from ..exceptions import RecordingFormatError, RecordingNotFoundError
from .recording import Recording, RecordingMetadata, RecordingMode

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_MODES = {m.value for m in RecordingMode}

# Key names written by earlier tool versions
_LEGACY_METADATA_KEYS = {
    "duration": "durationMs",
    "sampleRate": "sampleRateHz",
    "recordingMode": "mode",
}


@dataclass(frozen=True)
class RecordingFileInfo:
    filename: str
    path: str
    metadata: RecordingMetadata
    frame_count: int


class RecordingStore:
    """Load, save and list recording files"""

    def __init__(self, directory: PathLike = "."):
        self.directory = Path(directory)

    def _resolve(self, path: PathLike) -> Path:
        path = Path(path)
        if not path.is_absolute() and not path.exists():
            return self.directory / path
        return path

    def save(self, recording: Recording, path: PathLike) -> Path:
        """Write a recording as pretty-printed JSON"""
        path = self._resolve(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(recording.to_document(), f, indent=2)

        logger.info(f"Recording saved to {path} "
                    f"({len(recording)} frames, {recording.duration_ms / 1000:.2f}s)")
        return path

    def load(self, path: PathLike) -> Recording:
        """Read and validate a recording file"""
        path = self._resolve(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except FileNotFoundError:
            raise RecordingNotFoundError(f"Recording file not found: {path}") from None
        except (OSError, json.JSONDecodeError) as e:
            raise RecordingFormatError(f"Failed to load recording {path}: {e}") from e

        recording = Recording.from_document(self.validate(document))
        logger.info(f"Loaded recording from {path} "
                    f"({len(recording)} frames, mode {recording.mode.value})")
        return recording

    def list(self, directory: PathLike = None) -> List[RecordingFileInfo]:
        """Valid recordings in a directory, sorted by filename"""
        directory = Path(directory) if directory is not None else self.directory
        if not directory.is_dir():
            raise RecordingNotFoundError(f"Recording directory not found: {directory}")

        recordings = []
        for path in directory.glob("*.json"):
            try:
                recording = self.load(path)
            except RecordingFormatError as e:
                logger.warning(f"Skipping {path.name}: not a valid recording file ({e})")
                continue
            recordings.append(RecordingFileInfo(
                filename=path.name,
                path=str(path),
                metadata=recording.metadata,
                frame_count=len(recording)
            ))

        return sorted(recordings, key=lambda r: r.filename)

    @staticmethod
    def validate(document: Any) -> Dict[str, Any]:
        """
        Check structure and normalize a loaded document

        Returns a copy with legacy key names mapped and each frame carrying
        its mode; raises RecordingFormatError on anything unusable.
        """
        if not isinstance(document, dict):
            raise RecordingFormatError("Invalid recording file format: not an object")

        frames = document.get("frames")
        if not isinstance(frames, list):
            raise RecordingFormatError("Invalid recording file format: missing frames array")
        if not frames:
            raise RecordingFormatError("Recording file contains no frames")

        metadata = document.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise RecordingFormatError("Invalid recording file format: metadata is not an object")
        metadata = dict(metadata)
        for old, new in _LEGACY_METADATA_KEYS.items():
            if old in metadata and new not in metadata:
                metadata[new] = metadata.pop(old)

        default_mode = metadata.get("mode")
        if default_mode is None and isinstance(frames[0], dict):
            default_mode = frames[0].get("mode")
        if default_mode not in _MODES:
            raise RecordingFormatError(f"Unknown recording mode: {default_mode!r}")
        metadata["mode"] = default_mode

        normalized = []
        last = 0.0
        for index, frame in enumerate(frames):
            if not isinstance(frame, dict):
                raise RecordingFormatError(f"Invalid frame structure at index {index}")
            frame = dict(frame)
            if "timestamp" in frame and "timestampMs" not in frame:
                frame["timestampMs"] = frame.pop("timestamp")

            timestamp = frame.get("timestampMs")
            position = frame.get("position")
            if (isinstance(timestamp, bool) or not isinstance(timestamp, (int, float))
                    or not isinstance(position, list)):
                raise RecordingFormatError(
                    f"Invalid recording file format: invalid frame structure at index {index}")
            if len(position) != 6 or not all(_is_number(v) for v in position):
                raise RecordingFormatError(f"Frame {index} position must hold 6 numbers")
            if timestamp < last:
                raise RecordingFormatError(f"Frame {index} timestamp goes backwards")
            last = timestamp

            mode = frame.setdefault("mode", default_mode)
            if mode != default_mode:
                raise RecordingFormatError(f"Frame {index} mixes mode {mode!r} into a "
                                           f"{default_mode!r} recording")
            normalized.append(frame)

        return {"metadata": metadata, "frames": normalized}


def _is_number(value) -> bool:
    return (not isinstance(value, bool) and isinstance(value, (int, float))
            and math.isfinite(value))
