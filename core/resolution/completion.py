"""
Completion item construction.
"""

from typing import List, Sequence

from ..models.completion import CompletionItem, CompletionKind

SORT_KEY_PREFIX = "0"
MIN_SORT_KEY_WIDTH = 3
CORRELATION_TOKEN = 0


def completion_kind(prop: str) -> CompletionKind:
    """Color hint for any property whose name contains ``color``"""
    return CompletionKind.COLOR if "color" in prop else CompletionKind.VALUE


def sort_key_width(count: int) -> int:
    """Digits needed so every index of a ``count``-long list has equal width"""
    return max(MIN_SORT_KEY_WIDTH, len(str(max(count - 1, 0))))


def build_completions(values: Sequence[str], prop: str) -> List[CompletionItem]:
    """
    Convert allowed values into ranked completion items.

    Sort keys are zero-padded to a fixed width so lexicographic order in the
    editor matches configured order for any list length.
    """
    kind = completion_kind(prop)
    width = sort_key_width(len(values))

    return [
        CompletionItem(
            label=value,
            kind=kind,
            correlation_token=CORRELATION_TOKEN,
            sort_key=f"{SORT_KEY_PREFIX}{index:0{width}d}",
        )
        for index, value in enumerate(values)
    ]
