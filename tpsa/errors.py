"""Exceptions raised by the TPSA solver before any worker is launched."""
from __future__ import annotations


class TPSAError(Exception):
    """Base class for solver errors reported to the caller."""


class InputError(TPSAError, ValueError):
    """The point set (or a tour file) is unreadable or malformed."""


class ConfigError(TPSAError, ValueError):
    """The solver parameters are inconsistent."""
