"""Exception hierarchy for frontline.

Command chains signal control flow through outcome values (see
:mod:`frontline.domain.outcomes`), not exceptions. The exceptions here
cover lookup and configuration failures around the chain.
"""

from __future__ import annotations


class FrontlineError(Exception):
    """Base class for all frontline errors."""


class RequestNotFoundError(FrontlineError):
    """No request is registered under the given name (or it is internal-only)."""

    def __init__(self, name: str, *, internal: bool = False) -> None:
        self.name = name
        self.internal = internal
        if internal:
            msg = f"Request {name!r} is internal and cannot be requested directly."
        else:
            msg = f"Request {name!r} not found."
        super().__init__(msg)


class ConfigurationError(FrontlineError):
    """Invalid registry or backend configuration."""


class DatasourceNotFoundError(FrontlineError):
    """No datasource is registered under the given name."""


class OutputCaptureError(FrontlineError):
    """An output capture was started while another one was still active."""
