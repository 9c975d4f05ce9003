from __future__ import annotations

import re

from icalendar.parser import Contentline

from core.errors import FormatError

FOLDED_LINE = re.compile(r"\r?\n[ \t]")
# iana-token / x-name
PROPERTY_NAME = re.compile(r"[A-Za-z0-9-]+")


def parse_property(text: str) -> tuple[str, str]:
    """Split an iCalendar content line into its property name and value.

    Folded lines are unfolded first. Property parameters
    (``NAME;PARAM=x:value``) are parsed for validity and then dropped.
    """
    line = FOLDED_LINE.sub("", text).rstrip("\r\n")
    if "\n" in line or "\r" in line:
        raise FormatError(f"Expected a single content line: {text!r}")
    if ":" not in line:
        raise FormatError(f"Content line has no value separator: {text!r}")

    try:
        name, _params, value = Contentline(line).parts()
    except ValueError as exc:
        raise FormatError(f"Malformed content line: {text!r}") from exc

    name = str(name)
    if not PROPERTY_NAME.fullmatch(name):
        raise FormatError(f"Invalid property name {name!r} in content line: {text!r}")

    return name, str(value)
