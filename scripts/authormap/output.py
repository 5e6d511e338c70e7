"""Author file writing and console summary."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence, TextIO

logger = logging.getLogger("authormap.output")


def write_author_file(lines: Sequence[str], path: str | os.PathLike[str]) -> Path:
    """Write one mapping line per entry, UTF-8, newline terminated."""
    target = Path(path)
    tmp = target.with_name(target.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8", newline="\n") as f:
            for line in lines:
                f.write(line)
                f.write("\n")
        # Readers never see a partially written file
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    logger.info("Wrote %d authors to %s", len(lines), target, extra={"identities": len(lines)})
    return target


def print_detected_users(lines: Sequence[str], stream: TextIO) -> None:
    print("\n\nDetected users\n--------------", file=stream)
    for line in lines:
        print(line, file=stream)
