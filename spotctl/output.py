from json import dumps

from .models import Advertisement, PlaybackItem, PlaybackStatus

NOW_PLAYING = "Now Playing"
CURRENT_SONG = "Current song is"
# compact, one record per line
SEPARATORS = (",", ":")


def render_item(item: PlaybackItem, json_output: bool, prefix: str = NOW_PLAYING) -> str:
    if json_output:
        return dumps(item.to_dict(), separators=SEPARATORS)
    if isinstance(item, Advertisement):
        return str(item)
    return f"{prefix} {item}"


def render_status(status: PlaybackStatus, json_output: bool) -> str:
    return dumps(status.to_dict(), separators=SEPARATORS) if json_output else str(status)


def emit(line: str):
    # listen modes run forever, every line has to reach a pipe immediately
    print(line, flush=True)
