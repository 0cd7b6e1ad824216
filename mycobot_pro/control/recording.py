"""
Recording data model
Timestamped movement frames captured by the sampler and replayed by the player
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

import numpy as np
from dataclasses_json import LetterCase, config, dataclass_json

logger = logging.getLogger(__name__)


class RecordingMode(str, Enum):
    """What a position vector holds"""
    ANGLES = "angles"    # six joint angles in degrees
    COORDS = "coords"    # x, y, z (mm) and rx, ry, rz (degrees)


def _mode_field():
    return field(metadata=config(encoder=lambda m: RecordingMode(m).value,
                                 decoder=RecordingMode))


def _position_field():
    return field(metadata=config(encoder=list,
                                 decoder=lambda v: tuple(float(x) for x in v)))


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class MovementFrame:
    """Single recorded frame"""
    timestamp_ms: float                   # relative to the first frame
    position: Tuple[float, ...] = _position_field()
    mode: RecordingMode = _mode_field()


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class RecordingMetadata:
    recorded_at: str
    duration_ms: float
    frame_count: int
    sample_rate_hz: float
    mode: RecordingMode = _mode_field()


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class RecordingSummary:
    """Returned by stop_recording"""
    duration_ms: float
    frame_count: int
    sample_rate_hz: float
    mode: RecordingMode = _mode_field()
    average_frame_rate: float = 0.0


@dataclass(frozen=True)
class RecorderStatus:
    is_recording: bool
    is_playing: bool
    sample_rate_hz: float
    mode: RecordingMode
    current_frame_count: int
    recording_duration_ms: float


@dataclass(frozen=True)
class PlaybackSummary:
    passes: int = 0
    frames_sent: int = 0
    frame_errors: int = 0
    stopped: bool = False


_STANDARD_KEYS = ("recordedAt", "durationMs", "frameCount", "sampleRateHz", "mode")


@dataclass(frozen=True)
class Recording:
    """
    Complete, immutable recording

    ``metadata.duration_ms`` always equals the last frame's timestamp and
    ``metadata.frame_count`` the number of frames. ``extra`` carries any
    caller-supplied metadata fields.
    """
    metadata: RecordingMetadata
    frames: Tuple[MovementFrame, ...]
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_frames(cls, frames: Iterable[MovementFrame], sample_rate_hz: float,
                    mode: RecordingMode, recorded_at: Optional[str] = None,
                    extra: Optional[Dict[str, Any]] = None) -> "Recording":
        frames = tuple(frames)
        metadata = RecordingMetadata(
            recorded_at=recorded_at or datetime.now(timezone.utc).isoformat(),
            duration_ms=frames[-1].timestamp_ms if frames else 0.0,
            frame_count=len(frames),
            sample_rate_hz=sample_rate_hz,
            mode=RecordingMode(mode)
        )
        return cls(metadata=metadata, frames=frames, extra=dict(extra or {}))

    @property
    def mode(self) -> RecordingMode:
        return self.metadata.mode

    @property
    def duration_ms(self) -> float:
        return self.metadata.duration_ms

    def __len__(self):
        return len(self.frames)

    # ==================== Document form ====================

    def to_document(self) -> Dict[str, Any]:
        """JSON-ready dict: {"metadata": {...}, "frames": [...]}"""
        metadata = dict(self.extra)
        metadata.update(self.metadata.to_dict())
        return {
            "metadata": metadata,
            "frames": [frame.to_dict() for frame in self.frames],
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Recording":
        """
        Build from a validated document (see RecordingStore.validate)
        Frame count and duration are recomputed from the frames.
        """
        raw = dict(document.get("metadata") or {})
        frames = tuple(MovementFrame.from_dict(f) for f in document["frames"])
        mode = raw.get("mode") or frames[0].mode
        extra = {k: v for k, v in raw.items() if k not in _STANDARD_KEYS}
        return cls.from_frames(
            frames,
            sample_rate_hz=raw.get("sampleRateHz", 0),
            mode=RecordingMode(mode),
            recorded_at=raw.get("recordedAt"),
            extra=extra
        )

    # ==================== Editing ====================

    def simplify(self, tolerance: float = 0.5) -> "Recording":
        """
        Drop interior frames that lie on the straight line between their
        neighbours (every axis within ``tolerance``). First and last frames
        are always kept, so the duration is unchanged.
        """
        if len(self.frames) < 3:
            return self

        times = np.array([f.timestamp_ms for f in self.frames], dtype=float)
        points = np.array([f.position for f in self.frames], dtype=float)

        prev, cur, nxt = points[:-2], points[1:-1], points[2:]
        span = times[2:] - times[:-2]
        frac = np.divide(times[1:-1] - times[:-2], span,
                         out=np.zeros_like(span), where=span > 0)
        interpolated = prev + frac[:, None] * (nxt - prev)
        keep_interior = np.any(np.abs(cur - interpolated) > tolerance, axis=1)

        keep = np.concatenate(([True], keep_interior, [True]))
        frames = tuple(f for f, k in zip(self.frames, keep) if k)
        logger.info(f"Simplified recording: {len(self.frames)} -> {len(frames)} frames")

        return Recording.from_frames(
            frames,
            sample_rate_hz=self.metadata.sample_rate_hz,
            mode=self.mode,
            recorded_at=self.metadata.recorded_at,
            extra=self.extra
        )
