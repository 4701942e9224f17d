"""Normalization of raw container logs into clean text lines.

Game server consoles run inside an interactive TTY, so the log body returned
by the Engine is interleaved with the VT control sequences the server's
console library writes (colour codes, line erases, window titles, prompts).

The cleanup is an ordered table of literal substitutions. Order matters:
later entries operate on text already rewritten by earlier ones, so the
table must be applied as a pipeline and not folded into one regex.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

ESC = "\x1b"
BEL = "\x07"

LINE_DELIMITER = "\r\n"

# Left over at the end of a line when the console prompt was redrawn
LINE_END_ARTIFACT = "\n>"

# Lines that only contain prompt or colour-reset leftovers
DISCARDED_LINES = frozenset({">", "m"})

TERMINAL_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("\r", LINE_DELIMITER),
    (f"{ESC}[m>....\r{ESC}[K{ESC}[31;1m", LINE_DELIMITER),
    ("\t\t", ""),
    (f"{ESC}[m{ESC}[m]", ""),
    (f"{ESC}[K{ESC}", ""),
    (f"[{ESC}[m{ESC}[", ""),
    (f">{ESC}[2K\r", LINE_DELIMITER),
    (f"{ESC}[", LINE_DELIMITER),
    (f"{BEL}{ESC}", LINE_DELIMITER),
    ("]0;", ""),
    ("m>....", ""),
    ("[32m", ""),
)

# Whitespace stripped from both ends of every line
_TRIM_CHARS = " \t\n\r\0\x0b"


def strip_terminal_sequences(raw: str) -> str:
    """Apply the replacement table, in order, to ``raw``."""
    for pattern, replacement in TERMINAL_REPLACEMENTS:
        raw = raw.replace(pattern, replacement)
    return raw


def normalize_log(raw: str | bytes | None) -> list[str]:
    """Convert a raw log body into ordered, control-sequence-free lines.

    Args:
        raw: Log body as returned by ``GET containers/<ref>/logs``

    Returns:
        Lines oldest first; empty, ``>`` and ``m`` lines are dropped
    """
    if raw is None:
        return []
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")

    lines: list[str] = []
    for segment in strip_terminal_sequences(raw).split(LINE_DELIMITER):
        line = segment.replace(LINE_END_ARTIFACT, "").strip(_TRIM_CHARS)
        # checked after trimming so whitespace-only segments never leak through
        if not line or line in DISCARDED_LINES:
            continue
        lines.append(line)

    logger.debug(f"Normalized {len(raw)} chars of log output into {len(lines)} lines")
    return lines
