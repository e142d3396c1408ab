"""Writing flattened mappings to files and streams, and reading them back.

``write_mapping`` encodes first and writes second, so an encoding error never
leaves a partial file behind.  Writes to a path are retried on ``OSError``
with exponential backoff via ``tenacity``; writes to an already-open stream
happen exactly once because a half-written stream cannot be rewound safely.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config_normalizer.config import OutputFormat
from config_normalizer.encodings import get_encoding

__all__ = ["read_mapping", "write_mapping"]

logger = logging.getLogger(__name__)

Target = str | os.PathLike[str] | BinaryIO


def _is_path(target: object) -> bool:
    return isinstance(target, (str, os.PathLike))


def write_mapping(
    mapping: Mapping[str, str],
    target: Target,
    fmt: OutputFormat | str = OutputFormat.STANDARD,
    *,
    attempts: int = 1,
) -> None:
    """Encode ``mapping`` in ``fmt`` and write it to ``target``.

    Args:
        mapping:  Flattened mapping; keys and values must be ``str``.
        target:   File path, or a writable binary stream.
        fmt:      Output format.  Defaults to ``"standard"``.
        attempts: Total write attempts for path targets (>= 1).  Ignored
                  for streams.

    Raises:
        TypeError:  If a key or value is not a ``str``.
        ValueError: If ``fmt`` is unknown or ``attempts`` < 1.
        OSError:    If the last write attempt fails.
    """
    if attempts < 1:
        msg = f"attempts must be >= 1, got {attempts}"
        raise ValueError(msg)

    data = get_encoding(fmt).encode(mapping)

    if not _is_path(target):
        target.write(data)  # type: ignore[union-attr]
        return

    path = Path(target)  # type: ignore[arg-type]

    # Build the retry wrapper per call: attempts is a call parameter.
    _retry = retry(
        retry=retry_if_exception_type(OSError),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        stop=stop_after_attempt(attempts),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    _retry(path.write_bytes)(data)
    logger.info("Wrote %d properties to %s (%s)", len(mapping), path, fmt)


def read_mapping(
    source: str | os.PathLike[str] | BinaryIO,
    fmt: OutputFormat | str = OutputFormat.STANDARD,
) -> dict[str, str]:
    """Read a mapping previously written by ``write_mapping``."""
    encoding = get_encoding(fmt)
    if _is_path(source):
        data = Path(source).read_bytes()  # type: ignore[arg-type]
    else:
        data = source.read()  # type: ignore[union-attr]
    return encoding.decode(data)
