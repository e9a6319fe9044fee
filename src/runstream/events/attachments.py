"""Screenshot references embedded in captured test output."""

from __future__ import annotations

import base64
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

# Checked in order; the first pattern with a match wins.
SCREENSHOT_PATTERNS = (
    re.compile(r"\[Screenshot Image\]: (.*)$", re.MULTILINE),
    re.compile(r"\[Screenshot\]: (.*)$", re.MULTILINE),
)


def find_attachment_path(output: str | None) -> str | None:
    """Return the path from the first recognised tag in ``output``."""
    if not output:
        return None
    for pattern in SCREENSHOT_PATTERNS:
        match = pattern.search(output)
        if match:
            return match.group(1).strip()
    return None


def extract(output: str | None) -> str | None:
    """Base64-encode the file referenced by ``output``, if it exists."""
    path = find_attachment_path(output)
    if not path:
        return None

    target = Path(path)
    if not target.is_file():
        logger.debug("Screenshot %s referenced in output does not exist", path)
        return None

    try:
        data = target.read_bytes()
    except OSError as exc:
        logger.warning("Could not read screenshot %s: %s", path, exc)
        return None
    return base64.b64encode(data).decode("ascii")


def strip_tags(output: str | None) -> str | None:
    """Remove every line that carries an attachment tag."""
    if output is None:
        return None
    lines = [
        line
        for line in output.split("\n")
        if not any(pattern.search(line) for pattern in SCREENSHOT_PATTERNS)
    ]
    text = "\n".join(lines)
    return text or None


def extract_all(output: str | None) -> list[str | None]:
    """One slot per attachment kind, ``None`` where nothing was found."""
    return [extract(output)]
