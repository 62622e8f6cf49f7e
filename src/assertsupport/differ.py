"""Failure diff rendering.

Only needed when an expectation fails with a diffable pair, so the package
loads this module on first access of `assertsupport.Differ`.

Lines from `expected` are shown as removals and lines from `actual` as
additions.
"""

from __future__ import annotations

import difflib
import pprint
import sys
from typing import Any, Callable, List, Optional

from assertsupport.logging import get_logger

log = get_logger("assertsupport.differ")

_RED = "\033[31m"
_GREEN = "\033[32m"
_BLUE = "\033[34m"
_RESET = "\033[0m"


def _identity(obj: Any) -> Any:
    return obj


def _pandas_kind(obj: Any) -> Optional[str]:
    pd = sys.modules.get("pandas")
    # nothing can be a pandas object if pandas was never imported
    if pd is None:
        return None
    if isinstance(obj, pd.DataFrame):
        return "frame"
    if isinstance(obj, pd.Series):
        return "series"
    return None


class Differ:
    def __init__(self, *, color: bool = False, context_lines: int = 3,
                 object_preparer: Optional[Callable[[Any], Any]] = None):
        self.color = color
        self.context_lines = context_lines
        self.object_preparer = object_preparer or _identity

    @classmethod
    def from_settings(cls, settings: Any, **kwargs: Any) -> "Differ":
        return cls(color=settings.diff_color, context_lines=settings.diff_context_lines, **kwargs)

    def diff(self, actual: Any, expected: Any) -> str:
        """Return a printable diff, or "" when the pair is not worth diffing."""
        if actual is None or expected is None:
            return ""
        if isinstance(actual, str) and isinstance(expected, str):
            if "\n" in actual or "\n" in expected:
                return self.diff_as_string(actual, expected)
            return ""
        if _is_number(actual) or _is_number(expected):
            return ""
        if callable(actual) or callable(expected):
            return ""
        return self.diff_as_object(actual, expected)

    def diff_as_string(self, actual: str, expected: str) -> str:
        hunks = difflib.unified_diff(
            expected.splitlines(),
            actual.splitlines(),
            n=self.context_lines,
            lineterm="",
        )
        lines: List[str] = []
        for line in hunks:
            if line.startswith(("---", "+++")):
                continue
            lines.append(self._paint(line))
        if not lines:
            return ""
        return "\n" + "\n".join(lines) + "\n"

    def diff_as_object(self, actual: Any, expected: Any) -> str:
        actual = self.object_preparer(actual)
        expected = self.object_preparer(expected)
        if _pandas_kind(actual) is not None and _pandas_kind(actual) == _pandas_kind(expected):
            table = _compare_pandas(actual, expected)
            if table is not None:
                return table
        return self.diff_as_string(_object_to_string(actual), _object_to_string(expected))

    def _paint(self, line: str) -> str:
        if not self.color:
            return line
        if line.startswith("@@"):
            return f"{_BLUE}{line}{_RESET}"
        if line.startswith("-"):
            return f"{_RED}{line}{_RESET}"
        if line.startswith("+"):
            return f"{_GREEN}{line}{_RESET}"
        return line


def _is_number(obj: Any) -> bool:
    return isinstance(obj, (int, float, complex)) and not isinstance(obj, bool)


def _object_to_string(obj: Any) -> str:
    if _pandas_kind(obj) is not None:
        return obj.to_string()
    if isinstance(obj, str):
        return obj
    return pprint.pformat(obj, width=80)


def _compare_pandas(actual: Any, expected: Any) -> Optional[str]:
    """Render a cell-level comparison for identically labelled frames/series.

    Returns None when the labels differ; the caller then falls back to a
    text diff of both objects.
    """
    if not actual.index.equals(expected.index):
        return None
    if _pandas_kind(actual) == "frame" and not actual.columns.equals(expected.columns):
        return None
    try:
        table = expected.compare(actual, result_names=("expected", "actual"))
    except (TypeError, ValueError) as e:
        log.debug("pandas compare failed, falling back to text diff: %r", e)
        return None
    if table.empty:
        return ""
    return "\n" + table.to_string() + "\n"
