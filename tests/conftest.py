"""Shared fakes: a bus and player proxy that stand in for dbus-python objects."""

import typing as typ

import pytest
from gi.repository import GLib

from spotctl.constants import MPRIS_INTERFACE
from spotctl.session import SessionClient


class FakeSignalMatch:
    def __init__(self, player: "FakePlayer", handler: typ.Callable):
        self.player = player
        self.handler = handler

    def remove(self):
        self.player.handlers.remove(self.handler)


class FakePlayer:
    """Answers get_dbus_method()/connect_to_signal() like a dbus ProxyObject."""

    def __init__(self, properties: typ.Dict[str, typ.Any] | None = None):
        self.properties = dict(properties or {})
        self.handlers: typ.List[typ.Callable] = []
        self.events: typ.List[typ.Any] = []
        self.errors: typ.Dict[str, Exception] = {}
        self.on_call: typ.Dict[str, typ.List[typ.Callable[[], None]]] = {}

    def get_dbus_method(self, member: str, dbus_interface: str | None = None):
        def method(*args):
            self.events.append(member)
            if member in self.errors:
                raise self.errors[member]
            for hook in self.on_call.get(member, []):
                hook()
            if member == "Get":
                _, property_name = args
                return self.properties[property_name]

        return method

    def connect_to_signal(self, signal_name, handler, dbus_interface=None, **kwargs):
        assert signal_name == "PropertiesChanged"
        self.handlers.append(handler)
        return FakeSignalMatch(self, handler)

    def emit(self, changed: typ.Dict[str, typ.Any], interface: str = MPRIS_INTERFACE):
        self.events.append(("PropertiesChanged", interface, tuple(changed)))
        for handler in list(self.handlers):
            handler(interface, changed, [])

    def emit_soon(
        self,
        changed: typ.Dict[str, typ.Any],
        delay_ms: int = 0,
        interface: str = MPRIS_INTERFACE,
    ):
        """Deliver a notification once the main loop is running"""

        def fire():
            self.emit(changed, interface)
            return GLib.SOURCE_REMOVE

        if delay_ms:
            GLib.timeout_add(delay_ms, fire)
        else:
            GLib.idle_add(fire)


class FakeBus:
    def __init__(self, player: FakePlayer):
        self.player = player
        self.requested: typ.List[tuple] = []

    def get_object(self, bus_name, object_path, **kwargs):
        self.requested.append((bus_name, object_path, kwargs))
        return self.player


def metadata(
    title: str = "One More Time",
    album: str = "Discovery",
    artists: typ.Sequence[str] = ("Daft Punk",),
) -> typ.Dict[str, typ.Any]:
    return {
        "mpris:trackid": "spotify:track:0DiWol3AO6WpXZgp0goxAV",
        "xesam:artist": list(artists),
        "xesam:album": album,
        "xesam:title": title,
        "mpris:length": 320357000,
    }


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer({"Metadata": metadata(), "PlaybackStatus": "Playing"})


@pytest.fixture
def bus(player) -> FakeBus:
    return FakeBus(player)


@pytest.fixture
def client(bus) -> typ.Iterator[SessionClient]:
    with SessionClient(bus, "spotify", poll_timeout_ms=50) as session:
        yield session
