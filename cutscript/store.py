"""Observable, ordered collection of video segments."""

from typing import Callable, Iterator, Optional

from .models import EventKind, SegmentEvent, VideoSegment

Listener = Callable[[SegmentEvent], None]


class SegmentStore:
    """
    Segments sorted by start time, with change events.

    Every mutation is announced to subscribed listeners synchronously, so
    observers see all events of one command before the next command runs.
    """

    def __init__(self) -> None:
        self._segments: list[VideoSegment] = []
        self._next_id = 1
        self._listeners: list[Listener] = []

    # ── Observers ────────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, kind: EventKind, segment: Optional[VideoSegment] = None) -> None:
        event = SegmentEvent(kind=kind, segment=segment)
        for listener in list(self._listeners):
            listener(event)

    # ── Mutation ─────────────────────────────────────────────────────────────

    def _sort(self) -> None:
        self._segments.sort(key=lambda s: (s.start, s.id))

    def add(self, segment: VideoSegment) -> VideoSegment:
        if segment.id is None:
            segment.id = self._next_id
            self._next_id += 1
        elif self.get(segment.id) is not None:
            raise ValueError(f"duplicate segment id {segment.id}")
        else:
            self._next_id = max(self._next_id, segment.id + 1)

        self._segments.append(segment)
        self._sort()
        self._emit(EventKind.ADDED, segment)
        return segment

    def remove(self, segment_id: int) -> None:
        segment = self.get(segment_id)
        if segment is None:
            return
        self._segments.remove(segment)
        self._emit(EventKind.REMOVED, segment)

    def update(self, segment: VideoSegment) -> None:
        for i, existing in enumerate(self._segments):
            if existing.id == segment.id:
                self._segments[i] = segment
                self._sort()
                self._emit(EventKind.UPDATED, segment)
                return

    def clear(self) -> None:
        """Drop every segment and restart id assignment (one CLEARED event)."""
        self._segments.clear()
        self._next_id = 1
        self._emit(EventKind.CLEARED)

    # ── Queries ──────────────────────────────────────────────────────────────

    @property
    def segments(self) -> tuple[VideoSegment, ...]:
        return tuple(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[VideoSegment]:
        return iter(tuple(self._segments))

    def get(self, segment_id: int) -> Optional[VideoSegment]:
        return next((s for s in self._segments if s.id == segment_id), None)

    def segments_overlapping(self, start: float, end: float) -> list[VideoSegment]:
        return [s for s in self._segments if s.overlaps(start, end)]

    def segment_at(self, time: float) -> Optional[VideoSegment]:
        return next((s for s in self._segments if s.contains(time)), None)

    def visible_segments(self) -> list[VideoSegment]:
        return [s for s in self._segments if s.visible]

    def assembled(self) -> list[tuple[float, VideoSegment]]:
        """Visible segments laid end to end: (output start, segment) pairs."""
        timeline: list[tuple[float, VideoSegment]] = []
        cursor = 0.0
        for segment in self.visible_segments():
            timeline.append((cursor, segment))
            cursor += segment.duration
        return timeline

    def assembled_duration(self) -> float:
        return sum(s.duration for s in self.visible_segments())
