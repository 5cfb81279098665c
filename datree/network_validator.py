"""Decide how to react when the backend cannot be reached."""

from __future__ import annotations

from .utils import is_network_error

_OFFLINE_FAIL_MESSAGE = (
    "Failed since internet connection refused, you can use the following command "
    "to set your config to run offline:\ndatree config set offline local"
)


class OfflineModeError(Exception):
    """The network is unreachable and offline mode says to fail."""


class NetworkValidator:
    """Tracks the offline mode and whether the backend is reachable."""

    def __init__(self) -> None:
        self.is_backend_available = True
        self.offline_mode = "fail"

    def set_offline_mode(self, offline_mode: str) -> None:
        self.offline_mode = offline_mode

    def identify_network_error(self, err: BaseException) -> None:
        """Raise if ``err`` is a network failure and offline mode is "fail".

        In local mode a network failure marks the backend as unavailable.
        """
        if is_network_error(err):
            if self.offline_mode == "fail":
                raise OfflineModeError(_OFFLINE_FAIL_MESSAGE) from err
            self.is_backend_available = False

    def is_local_mode(self) -> bool:
        return self.offline_mode == "local"