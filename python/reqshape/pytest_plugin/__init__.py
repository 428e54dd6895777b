"""reqshape pytest plugin for request-shape assertions on mocked HTTP clients."""

from .mock import ClientMocker, Mock, client_mocker

__all__ = [  # noqa: RUF022
    "client_mocker",
    "ClientMocker",
    "Mock",
]
