# SPDX-License-Identifier: Apache-2.0
"""Shared CLI plumbing: verbosity flags and logging configuration."""

from __future__ import annotations

import argparse
import logging
import os

from popglobe.utils.env import env

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "quiet": logging.WARNING,
}


def add_verbosity_args(parser: argparse.ArgumentParser) -> None:
    """Attach ``--verbose``/``--quiet`` flags to ``parser``."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    group.add_argument("-q", "--quiet", action="store_true", help="Warnings only")


def apply_verbosity(ns: argparse.Namespace) -> None:
    """Translate verbosity flags into ``POPGLOBE_VERBOSITY`` and configure logging."""
    if getattr(ns, "verbose", False):
        os.environ["POPGLOBE_VERBOSITY"] = "debug"
    elif getattr(ns, "quiet", False):
        os.environ["POPGLOBE_VERBOSITY"] = "quiet"
    configure_logging_from_env()


def configure_logging_from_env(default: str = "info") -> int:
    """Configure root logging from ``POPGLOBE_VERBOSITY`` and return the level.

    Unknown verbosity names fall back to ``default``. Calling this again only
    adjusts the level of the already configured root logger.
    """
    name = (env("VERBOSITY", default) or default).lower()
    level = _LEVELS.get(name, _LEVELS.get(default, logging.INFO))
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    root.setLevel(level)
    return level
