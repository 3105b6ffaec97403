"""Mask credential values before command lines or output reach a log or error."""

from __future__ import annotations

import re
import shlex
from typing import Iterable, Sequence

MASK = "xxxxxxxx"

# ``--password=...`` up to the next whitespace or closing quote, for strings
# whose secret list is unknown (e.g. commands echoed back by a wrapped program).
_PASSWORD_FLAG = re.compile(r"(--password=)([^\s']+)")


def redact(text: str, secrets: Iterable[str] = ()) -> str:
    """Return *text* with every secret (raw or shell-quoted) replaced by the mask."""
    out = text
    # Longest first so a secret that contains another is masked whole.
    for secret in sorted({s for s in secrets if s}, key=len, reverse=True):
        # Forms a secret takes inside a rendered shell line: quoted on its
        # own, escaped inside a larger single-quoted token, or raw.
        for form in (shlex.quote(secret), secret.replace("'", "'\"'\"'"), secret):
            out = out.replace(form, MASK)
    return _PASSWORD_FLAG.sub(lambda m: m.group(1) + MASK, out)


def redact_lines(lines: Sequence[str], secrets: Iterable[str] = ()) -> tuple[str, ...]:
    """Apply :func:`redact` to every line."""
    secrets = tuple(secrets)
    return tuple(redact(line, secrets) for line in lines)


__all__ = ["MASK", "redact", "redact_lines"]
