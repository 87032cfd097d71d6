"""Data models for conversion results"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ConversionOutcome(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


def _first(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _strings(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item) for item in value)


@dataclass(frozen=True)
class ConversionResult:
    """Normalized outcome of one conversion request

    Attributes:
        outcome: SUCCESS, PARTIAL or FAILURE
        playlist_url: Link to the created playlist, if any
        playlist_name: Name of the created playlist, if any
        total_source_tracks: Tracks read from the source playlist
        matched_tracks: Tracks found in the target catalog
        added_tracks: Tracks added to the new playlist
        api_errors: Issues reported by upstream APIs
        unmatched_tracks: Source tracks with no catalog match
        message: Error message for PARTIAL and FAILURE outcomes
    """
    outcome: ConversionOutcome
    playlist_url: Optional[str] = None
    playlist_name: Optional[str] = None
    total_source_tracks: Optional[int] = None
    matched_tracks: Optional[int] = None
    added_tracks: Optional[int] = None
    api_errors: Tuple[str, ...] = ()
    unmatched_tracks: Tuple[str, ...] = ()
    message: Optional[str] = None

    @classmethod
    def from_data(
        cls,
        outcome: ConversionOutcome,
        data: Dict[str, Any],
        message: Optional[str] = None,
    ) -> "ConversionResult":
        """Build a result from the backend's ``data`` payload

        Accepts the backend's Spotify/YouTube specific keys as well as
        neutral ones.
        """
        return cls(
            outcome=outcome,
            playlist_url=_first(data, "spotify_playlist_url", "playlist_url"),
            playlist_name=_first(data, "spotify_playlist_name", "playlist_name"),
            total_source_tracks=_first(data, "total_youtube_tracks", "total_source_tracks"),
            matched_tracks=_first(data, "found_spotify_tracks", "matched_tracks"),
            added_tracks=_first(data, "tracks_added", "added_tracks"),
            api_errors=_strings(data.get("api_errors")),
            unmatched_tracks=_strings(_first(data, "not_found_tracks", "unmatched_tracks")),
            message=message,
        )

    @classmethod
    def failure(cls, message: str) -> "ConversionResult":
        return cls(outcome=ConversionOutcome.FAILURE, message=message)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["outcome"] = self.outcome.value
        data["api_errors"] = list(self.api_errors)
        data["unmatched_tracks"] = list(self.unmatched_tracks)
        return data
