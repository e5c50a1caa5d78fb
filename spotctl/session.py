import enum
import logging
import typing as typ
from collections import deque
from pprint import pformat

import dbus
import dbus.mainloop.glib
from dbus.exceptions import DBusException
from gi.repository import GLib

from .constants import (
    DBUS_INTERFACE,
    DEFAULT_PLAYER,
    DEFAULT_POLL_TIMEOUT_MS,
    METADATA,
    MPRIS_INTERFACE,
    MPRIS_PARTIAL_INTERFACE,
    MPRIS_PATH,
    PLAYBACK_STATUS,
    PLAYER_NOT_RUNNING_ERRORS,
)
from .errors import BusUnavailable, CallError, PlayerNotRunning, QueryFailed
from .models import PlaybackItem, PlaybackStatus, decode_playback_item, decode_status

DBUS_DICT_TYPE = typ.MutableMapping[dbus.String, typ.Any]


class TransportCommand(enum.Enum):
    NEXT = "Next"
    PREVIOUS = "Previous"
    PLAY = "Play"
    PAUSE = "Pause"
    TOGGLE = "PlayPause"


class PropertyWatch:
    """Queue of PropertiesChanged values for one property of the MPRIS player.

    Signals are only dispatched while the GLib main loop runs, so values arrive
    strictly during collect() or next() and keep the order the player sent them in.
    """

    def __init__(self, interface: dbus.Interface, property_name: str):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.property_name = property_name
        self.pending: typ.Deque[typ.Any] = deque()
        self._loop = GLib.MainLoop()
        self._wanted: int | None = None
        self._signal_connection = None
        self._signal_connection = interface.connect_to_signal(
            "PropertiesChanged",
            self.handle_properties_changed,
            dbus_interface=DBUS_INTERFACE,
        )

    def __del__(self):
        self.close()

    def close(self):
        if self._signal_connection:
            self._signal_connection.remove()
            self._signal_connection = None

    def handle_properties_changed(
        self, interface_name, message: DBUS_DICT_TYPE, *args, **kwargs
    ):
        if interface_name != MPRIS_INTERFACE or self.property_name not in message:
            # players also announce capability changes, ignore those
            return

        self.logger.debug(
            f"handle_properties_changed(): {pformat(dict(message), indent=2)}"
        )
        self.pending.append(message[self.property_name])
        if self._wanted is not None and len(self.pending) >= self._wanted:
            self._loop.quit()

    def clear(self):
        if self.pending:
            self.logger.debug(f"Discarding {len(self.pending)} stale notifications")
        self.pending.clear()

    def collect(self, timeout_ms: int) -> typ.List[typ.Any]:
        """Run the main loop for timeout_ms and return every value seen, oldest first"""

        def on_timeout():
            self._loop.quit()
            return GLib.SOURCE_REMOVE

        self._wanted = None
        GLib.timeout_add(timeout_ms, on_timeout)
        self._loop.run()

        values = list(self.pending)
        self.pending.clear()
        self.logger.debug(f"collected {len(values)} {self.property_name} updates")
        return values

    def next(self) -> typ.Any:
        """Block until one value is available, no timeout"""
        if not self.pending:
            self._wanted = 1
            try:
                self._loop.run()
            finally:
                self._wanted = None
        return self.pending.popleft()


class SessionClient:
    def __init__(
        self,
        bus: dbus.Bus,
        player_name: str = DEFAULT_PLAYER,
        poll_timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS,
    ):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.player_name = player_name
        self.bus_name = MPRIS_PARTIAL_INTERFACE + player_name
        self.poll_timeout_ms = poll_timeout_ms
        self._watches: typ.Dict[str, PropertyWatch] = {}

        self._bus = bus
        # don't resolve the owner now, a missing player only fails on the first call
        player = bus.get_object(
            self.bus_name,
            MPRIS_PATH,
            introspect=False,
            follow_name_owner_changes=True,
        )
        self.player = dbus.Interface(player, MPRIS_INTERFACE)
        self.interface = dbus.Interface(player, DBUS_INTERFACE)

    @classmethod
    def connect(
        cls,
        player_name: str = DEFAULT_PLAYER,
        poll_timeout_ms: int = DEFAULT_POLL_TIMEOUT_MS,
    ) -> "SessionClient":
        dbus.mainloop.glib.DBusGMainLoop(set_as_default=True)
        try:
            bus = dbus.SessionBus()
        except DBusException as err:
            raise BusUnavailable(str(err)) from err
        return cls(bus, player_name, poll_timeout_ms)

    def __enter__(self) -> "SessionClient":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        for watch in self._watches.values():
            watch.close()
        self._watches.clear()

    def watch(self, property_name: str) -> PropertyWatch:
        # kept for the session so a listen loop doesn't miss updates between waits
        if property_name not in self._watches:
            self._watches[property_name] = PropertyWatch(self.interface, property_name)
        return self._watches[property_name]

    def _classify(self, err: DBusException, error_cls: typ.Type[CallError]):
        dbus_name = err.get_dbus_name()
        if dbus_name in PLAYER_NOT_RUNNING_ERRORS:
            self.logger.debug(f"[{self.bus_name}] not running: {err}")
            return PlayerNotRunning(self.player_name.capitalize(), dbus_name)
        return error_cls(err.get_dbus_message() or str(err), dbus_name)

    def send_transport_command(
        self, cmd: TransportCommand, error_cls: typ.Type[CallError] = CallError
    ):
        self.logger.debug(f"[{self.bus_name}] {cmd.value}()")
        try:
            self.player.get_dbus_method(cmd.value)()
        except DBusException as err:
            raise self._classify(err, error_cls) from err

    def query_interface(self, property_name: str) -> typ.Any:
        try:
            return self.interface.Get(MPRIS_INTERFACE, property_name)
        except DBusException as err:
            raise self._classify(err, QueryFailed) from err

    def current_item(self) -> PlaybackItem:
        return decode_playback_item(self.query_interface(METADATA))

    def current_status(self) -> PlaybackStatus:
        return decode_status(self.query_interface(PLAYBACK_STATUS))

    def advance(self, direction: TransportCommand) -> PlaybackItem:
        """Skip a track and report what the player switched to.

        The player updates Metadata asynchronously after Next/Previous returns, so
        the answer is the last Metadata notification seen within poll_timeout_ms.
        When the window stays quiet the property is read once instead.
        """
        if direction not in (TransportCommand.NEXT, TransportCommand.PREVIOUS):
            raise ValueError(f"not a skip command: {direction}")

        watch = self.watch(METADATA)
        watch.clear()
        self.send_transport_command(direction, QueryFailed)

        updates = watch.collect(self.poll_timeout_ms)
        if not updates:
            self.logger.info(
                f"No {METADATA} update within {self.poll_timeout_ms}ms, querying player"
            )
            return self.current_item()

        return decode_playback_item(updates[-1])

    def wait_for_item_change(self) -> PlaybackItem:
        return decode_playback_item(self.watch(METADATA).next())

    def wait_for_status_change(self) -> PlaybackStatus:
        return decode_status(self.watch(PLAYBACK_STATUS).next())

    def __str__(self):
        return self.player_name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.bus_name})"
