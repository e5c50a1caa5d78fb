__all__ = [
    "cli",
    "main",
    "SessionClient",
    "TransportCommand",
    "Track",
    "Advertisement",
    "PlaybackStatus",
    "decode_playback_item",
    "decode_status",
]

import argparse
import logging
import os
import sys
import typing as typ
from pprint import pformat

from yaml import safe_load as load

from .constants import DEFAULT_CONFIG, DEFAULT_PLAYER, DEFAULT_POLL_TIMEOUT_MS
from .errors import PlayerNotRunning, SpotctlError
from .models import (
    Advertisement,
    PlaybackStatus,
    Track,
    decode_playback_item,
    decode_status,
)
from .output import CURRENT_SONG, emit, render_item, render_status
from .session import SessionClient, TransportCommand

EXIT_OK = 0
EXIT_PLAYER_NOT_RUNNING = 1
EXIT_FAILURE = 2
EXIT_INTERRUPTED = 130

logger = logging.getLogger("main")


def cli():
    sys.exit(main())


def main(argv: typ.Sequence[str] | None = None) -> int:
    args, config = setup(argv)

    try:
        client = SessionClient.connect(config["player"], config["poll_timeout_ms"])
    except SpotctlError as err:
        logger.critical(f"Unable to connect: {err}", exc_info=True)
        return EXIT_FAILURE

    with client:
        try:
            ACTIONS[args.action](client, args)
        except PlayerNotRunning as err:
            emit(str(err))
            return EXIT_PLAYER_NOT_RUNNING
        except SpotctlError as err:
            logger.critical(f"{args.action} failed: {err!r}", exc_info=True)
            return EXIT_FAILURE
        except KeyboardInterrupt:
            logger.info("Interrupted: Shutting down...")
            return EXIT_INTERRUPTED

    return EXIT_OK


def setup(
    argv: typ.Sequence[str] | None = None,
) -> tuple[argparse.Namespace, typ.Dict[str, typ.Any]]:
    parser = setup_parser()
    args = parser.parse_args(argv)

    config_file = os.path.expanduser(args.config or DEFAULT_CONFIG)
    config = read_config_file(config_file, missing_ok=args.config is None)
    check_config(parser, config, config_file)

    verbose = args.verbose or config.get("verbose", False)

    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    logger.debug(pformat(config, indent=True))

    return args, config


def setup_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spotctl", description="Control Spotify over MPRIS"
    )
    parser.add_argument(
        "-c",
        "--config",
        help=f"YAML configuration file (default: {DEFAULT_CONFIG})",
        required=False,
        default=None,
    )
    parser.add_argument(
        "-v", "--verbose", help="debug logging", action="store_true", default=False
    )
    parser.add_argument(
        "--json", help="Output the information in JSON format", action="store_true"
    )

    actions = parser.add_subparsers(dest="action", metavar="ACTION", required=True)
    listen = actions.add_parser("listen", help="Listen for an event from the player")
    events = listen.add_subparsers(dest="event", metavar="EVENT", required=True)
    events.add_parser(
        "song", aliases=["song-changed"], help="Listen for when the song changes"
    )
    events.add_parser(
        "toggled", help="Listen for when the play/pause button is toggled"
    )

    actions.add_parser("next", help="Play the next song")
    actions.add_parser("previous", help="Play the previous song")
    actions.add_parser("pause", help="Pause the current song")
    actions.add_parser("play", help="Play the current song")
    actions.add_parser("toggle", help="Toggle the play/pause button")
    actions.add_parser("status", help="Get the current play/pause status")
    actions.add_parser("song", help="Get the current song")
    return parser


def read_config_file(config_file: str, missing_ok: bool = False) -> typ.Dict[str, typ.Any]:
    if missing_ok and not os.path.exists(config_file):
        return {}
    assert os.path.isfile(config_file), f"not a file: {config_file}"
    with open(config_file, "r") as fh:
        # an empty file loads as None
        return load(fh) or {}


def check_config(
    parser: argparse.ArgumentParser, config: typ.Any, config_file: str
):
    """Fill in defaults, exit with a usage error on a malformed config"""
    if not isinstance(config, dict):
        parser.error(f"{config_file}: expected a mapping, got {type(config).__name__}")

    config["player"] = str(config.get("player", DEFAULT_PLAYER))
    try:
        poll_timeout_ms = int(config.get("poll_timeout_ms", DEFAULT_POLL_TIMEOUT_MS))
    except (TypeError, ValueError):
        poll_timeout_ms = 0
    if poll_timeout_ms <= 0:
        parser.error(
            f"{config_file}: poll_timeout_ms must be a positive integer, "
            f"got {config.get('poll_timeout_ms')!r}"
        )
    config["poll_timeout_ms"] = poll_timeout_ms


def listen(client: SessionClient, args: argparse.Namespace):
    if args.event == "toggled":
        while True:
            emit(render_status(client.wait_for_status_change(), args.json))
    else:
        while True:
            emit(render_item(client.wait_for_item_change(), args.json))


def skip_next(client: SessionClient, args: argparse.Namespace):
    emit(render_item(client.advance(TransportCommand.NEXT), args.json))


def skip_previous(client: SessionClient, args: argparse.Namespace):
    emit(render_item(client.advance(TransportCommand.PREVIOUS), args.json))


def song(client: SessionClient, args: argparse.Namespace):
    emit(render_item(client.current_item(), args.json, prefix=CURRENT_SONG))


def status(client: SessionClient, args: argparse.Namespace):
    emit(render_status(client.current_status(), args.json))


def transport(cmd: TransportCommand) -> typ.Callable[[SessionClient, argparse.Namespace], None]:
    def send(client: SessionClient, args: argparse.Namespace):
        client.send_transport_command(cmd)

    return send


ACTIONS: typ.Dict[str, typ.Callable[[SessionClient, argparse.Namespace], None]] = {
    "listen": listen,
    "next": skip_next,
    "previous": skip_previous,
    "pause": transport(TransportCommand.PAUSE),
    "play": transport(TransportCommand.PLAY),
    "toggle": transport(TransportCommand.TOGGLE),
    "status": status,
    "song": song,
}
