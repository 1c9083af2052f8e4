"""
Line normalization shared by every extractor, plus the cascade runner
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalizedText:
    """Trimmed, non-empty lines of one capture in original and upper case.

    ``lines[i]`` and ``upper_lines[i]`` always describe the same source line.
    ``upper`` is the whole upper-cased text joined back with newlines, used for
    regex scans that may cross a line break.
    """
    lines: Tuple[str, ...] = ()
    upper_lines: Tuple[str, ...] = ()
    upper: str = field(default="")

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def original(self, index: int, start: int = 0, end: Optional[int] = None) -> str:
        """Slice of the original-case line, using offsets found on the upper line."""
        line = self.lines[index]
        upper = self.upper_lines[index]
        if len(line) != len(upper):
            # upper() changed the length (e.g. "ß" -> "SS"), offsets don't map back
            return upper[start:end]
        return line[start:end]

    def find_line(self, predicate: Callable[[str], bool], start: int = 0) -> int:
        """Index of the first upper line at or after ``start`` matching predicate, else -1."""
        for i in range(start, len(self.upper_lines)):
            if predicate(self.upper_lines[i]):
                return i
        return -1


def normalize_text(raw_text) -> NormalizedText:
    """Split raw OCR text into trimmed lines; anything that isn't a string is empty."""
    if not isinstance(raw_text, str) or not raw_text.strip():
        return NormalizedText()

    lines = []
    upper_lines = []
    for line in raw_text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        lines.append(stripped)
        upper_lines.append(stripped.upper())

    return NormalizedText(
        lines=tuple(lines),
        upper_lines=tuple(upper_lines),
        upper="\n".join(upper_lines),
    )


Strategy = Callable[..., Optional[str]]


def run_cascade(strategies: Sequence[Strategy], doc: NormalizedText, flags, field_name: str = "") -> Optional[str]:
    """Evaluate strategies in order and return the first non-empty result."""
    for strategy in strategies:
        value = strategy(doc, flags)
        if value:
            value = value.strip()
        if value:
            logger.debug("%s resolved by %s: %r", field_name or "field", strategy.__name__, value)
            return value
    return None


def collapse_spaces(value: str) -> str:
    return " ".join(value.split())


def starts_with_label(line: str, labels: Sequence[str]) -> bool:
    """True when ``line`` begins with one of ``labels`` as a whole word."""
    for label in labels:
        if line.startswith(label):
            rest = line[len(label):]
            if not rest or not rest[0].isalnum():
                return True
    return False


def split_words(line: str) -> List[str]:
    return [w for w in "".join(c if c.isalnum() else " " for c in line).split() if w]


_NAME_DISALLOWED_RE = re.compile(r"[^A-Za-z\s.'\-/]")


def clean_name(name: str) -> str:
    """Collapse whitespace and drop characters that can't appear in a name."""
    if not name:
        return ""
    return collapse_spaces(_NAME_DISALLOWED_RE.sub("", collapse_spaces(name)))


def is_valid_name(name: str) -> bool:
    """At least two words, or one word of 5+ letters (single-name cultures)."""
    if not name:
        return False
    words = name.split()
    if len(words) >= 2:
        return True
    return len(words) == 1 and len(words[0]) >= 5
