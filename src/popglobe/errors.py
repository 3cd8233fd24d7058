# SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy shared by the library, CLI and HTTP layers."""

from __future__ import annotations


class PopglobeError(Exception):
    """Base class for popglobe errors."""


class DatasetLoadError(PopglobeError):
    """Raised when a boundary or demographic dataset cannot be loaded."""


class ControlError(PopglobeError, ValueError):
    """Raised when a control-surface input is out of range or unknown."""


class SessionStateError(PopglobeError, RuntimeError):
    """Raised when a render session is used outside its lifecycle."""
