__all__ = [
    "SpotctlError",
    "ConnectError",
    "BusUnavailable",
    "CallError",
    "PlayerNotRunning",
    "QueryError",
    "QueryFailed",
    "DecodeError",
    "MissingField",
    "TypeMismatch",
    "UnknownStatus",
]

import typing as typ


class SpotctlError(Exception):
    pass


class ConnectError(SpotctlError):
    pass


class BusUnavailable(ConnectError):
    def __init__(self, details: str):
        self.details = details
        super().__init__(f"session bus unavailable: {details}")


class CallError(SpotctlError):
    """A bus fault raised by a remote call, with the D-Bus error name attached"""

    def __init__(self, details: str, dbus_name: str | None = None):
        self.details = details
        self.dbus_name = dbus_name
        super().__init__(details)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.details!r}, {self.dbus_name!r})"


class QueryError(SpotctlError):
    """Anything reading or waiting on a player property can raise"""


class PlayerNotRunning(CallError, QueryError):
    def __init__(self, player_name: str, dbus_name: str | None = None):
        self.player_name = player_name
        super().__init__(f"{player_name} not running", dbus_name)


class QueryFailed(CallError, QueryError):
    pass


class DecodeError(QueryError):
    """The player sent a value outside of the MPRIS contract"""


class MissingField(DecodeError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"missing field: {field}")


class TypeMismatch(DecodeError):
    def __init__(self, field: str, expected: str, actual: typ.Any):
        self.field = field
        self.expected = expected
        self.actual = type(actual).__name__
        super().__init__(f"{field}: expected {expected}, got {self.actual}")


class UnknownStatus(DecodeError):
    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"unknown playback status: {raw!r}")
