import pytest

from .mock import client_mocker  # load the client_mocker fixture


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register ini options seeding every client_mocker."""
    parser.addini(
        "reqshape_strict",
        type="bool",
        default=False,
        help="reqshape: raise when no mock rule matches a request",
    )
    parser.addini(
        "reqshape_raise_on_mismatch",
        type="bool",
        default=True,
        help="reqshape: raise the first predicate failure from send() instead of trying the next mock rule",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Configure the pytest plugin."""
    config.addinivalue_line(
        "markers",
        "reqshape(strict=None, raise_on_mismatch=None): override client_mocker settings for a test",
    )
