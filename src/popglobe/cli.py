# SPDX-License-Identifier: Apache-2.0
"""Command-line entry point: ``popglobe`` / ``python -m popglobe.cli``."""

from __future__ import annotations

from typing import Sequence

from popglobe.visualization.cli_globe import build_parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    return int(ns.func(ns) or 0)


if __name__ == "__main__":  # pragma: no cover - exercised in CLI tests
    raise SystemExit(main())
