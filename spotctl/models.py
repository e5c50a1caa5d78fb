import enum
import logging
import typing as typ
from collections.abc import Mapping
from dataclasses import dataclass

from .constants import ADVERTISEMENT, XESAM_ALBUM, XESAM_ARTIST, XESAM_TITLE
from .errors import MissingField, TypeMismatch, UnknownStatus

logger = logging.getLogger(__name__)

# json form of an advertisement, scripts reading --json output match on it
AD_TAG = "Ad"


@dataclass(frozen=True)
class Track:
    title: str
    album: str
    artists: typ.Tuple[str, ...]

    def to_dict(self) -> typ.Dict[str, typ.Any]:
        return {
            "artists": list(self.artists),
            "album": self.album,
            "title": self.title,
        }

    def __str__(self):
        return f'"{self.title}" by {",".join(self.artists)}'


@dataclass(frozen=True)
class Advertisement:
    def to_dict(self) -> str:
        # serialized as a bare tag, there is nothing else to report
        return AD_TAG

    def __str__(self):
        return ADVERTISEMENT


PlaybackItem = Track | Advertisement


class PlaybackStatus(str, enum.Enum):
    PLAYING = "Playing"
    PAUSED = "Paused"

    def to_dict(self) -> typ.Dict[str, str]:
        return {"status": self.value}

    def __str__(self):
        return self.value


def _require(metadata: Mapping, field: str) -> typ.Any:
    try:
        return metadata[field]
    except KeyError:
        raise MissingField(field) from None


def _require_string(metadata: Mapping, field: str) -> str:
    value = _require(metadata, field)
    if not isinstance(value, str):
        raise TypeMismatch(field, "string", value)
    return str(value)


def _require_string_list(metadata: Mapping, field: str) -> typ.Tuple[str, ...]:
    value = _require(metadata, field)
    # dbus.Array is a list subclass, a bare string must not be split into characters
    if not isinstance(value, (list, tuple)):
        raise TypeMismatch(field, "array of string", value)
    if not value:
        raise TypeMismatch(field, "non-empty array of string", value)
    for entry in value:
        if not isinstance(entry, str):
            raise TypeMismatch(field, "array of string", entry)
    return tuple(str(entry) for entry in value)


def decode_playback_item(value: typ.Any) -> PlaybackItem:
    """Convert a Metadata property value into a Track or an Advertisement.

    Every required field is checked before anything is built, a partially valid
    payload raises instead of yielding a Track with defaulted fields.

    Raises MissingField when a required xesam field is absent and TypeMismatch
    when the payload or one of its fields has the wrong shape.
    """
    if not isinstance(value, Mapping):
        raise TypeMismatch("Metadata", "dict", value)

    artists = _require_string_list(value, XESAM_ARTIST)
    album = _require_string(value, XESAM_ALBUM)
    title = _require_string(value, XESAM_TITLE)

    if ADVERTISEMENT in artists:
        logger.debug(f"advertisement detected: {title=}")
        return Advertisement()

    return Track(title=title, album=album, artists=artists)


def decode_status(raw: typ.Any) -> PlaybackStatus:
    if not isinstance(raw, str):
        raise TypeMismatch("PlaybackStatus", "string", raw)
    try:
        return PlaybackStatus(str(raw))
    except ValueError:
        raise UnknownStatus(str(raw)) from None
