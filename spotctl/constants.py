__all__ = [
    "MPRIS_PARTIAL_INTERFACE",
    "MPRIS_INTERFACE",
    "DBUS_INTERFACE",
    "MPRIS_PATH",
    "PLAYBACK_STATUS",
    "METADATA",
    "XESAM_ARTIST",
    "XESAM_ALBUM",
    "XESAM_TITLE",
    "ADVERTISEMENT",
    "DEFAULT_PLAYER",
    "DEFAULT_POLL_TIMEOUT_MS",
    "DEFAULT_CONFIG",
    "DBUS_ERROR_UNKNOWN_METHOD",
    "PLAYER_NOT_RUNNING_ERRORS",
]


MPRIS_PARTIAL_INTERFACE = "org.mpris.MediaPlayer2."
MPRIS_INTERFACE = MPRIS_PARTIAL_INTERFACE + "Player"
DBUS_INTERFACE = "org.freedesktop.DBus.Properties"
MPRIS_PATH = "/org/mpris/MediaPlayer2"
PLAYBACK_STATUS = "PlaybackStatus"
METADATA = "Metadata"

XESAM_ARTIST = "xesam:artist"
XESAM_ALBUM = "xesam:album"
XESAM_TITLE = "xesam:title"
# spotify free tier reports ads with this artist
ADVERTISEMENT = "Advertisement"

DEFAULT_PLAYER = "spotify"
DEFAULT_POLL_TIMEOUT_MS = 100
DEFAULT_CONFIG = "~/.config/spotctl/config.yaml"

DBUS_ERROR_UNKNOWN_METHOD = "org.freedesktop.DBus.Error.UnknownMethod"
PLAYER_NOT_RUNNING_ERRORS = frozenset(
    (
        DBUS_ERROR_UNKNOWN_METHOD,
        "org.freedesktop.DBus.Error.UnknownObject",
        "org.freedesktop.DBus.Error.ServiceUnknown",
        "org.freedesktop.DBus.Error.NameHasNoOwner",
    )
)
