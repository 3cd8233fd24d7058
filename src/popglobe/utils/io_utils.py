# SPDX-License-Identifier: Apache-2.0
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO


@contextmanager
def open_text_output(path_or_dash: str | Path) -> Iterator[TextIO]:
    """Yield a writable text stream for path or '-' (stdout) without closing stdout.

    When ``path_or_dash`` is '-', yields ``sys.stdout`` and does not close it on exit.
    Otherwise creates missing parent directories, opens the path as UTF-8 and
    closes it when the context exits.
    """
    if str(path_or_dash) == "-":
        yield sys.stdout
    else:
        target = Path(path_or_dash)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8") as f:
            yield f
