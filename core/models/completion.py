"""
Completion item model returned by the resolution pipeline.
"""

from enum import Enum
from typing import Any, Dict

from lsprotocol import types as lsp
from pydantic import BaseModel, ConfigDict, Field


class CompletionKind(Enum):
    """Presentation hint for a suggested value"""
    COLOR = "color"
    VALUE = "value"

    def to_lsp(self) -> lsp.CompletionItemKind:
        if self is CompletionKind.COLOR:
            return lsp.CompletionItemKind.Color
        return lsp.CompletionItemKind.Value


class CompletionItem(BaseModel):
    """A single ranked suggestion"""
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    label: str
    kind: CompletionKind = CompletionKind.VALUE
    correlation_token: int = 0
    sort_key: str = Field(min_length=1)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the external ``{label, kind, correlationToken, sortKey}`` shape"""
        return {
            "label": self.label,
            "kind": self.kind.value,
            "correlationToken": self.correlation_token,
            "sortKey": self.sort_key,
        }

    def to_lsp(self) -> lsp.CompletionItem:
        return lsp.CompletionItem(
            label=self.label,
            kind=self.kind.to_lsp(),
            data=self.correlation_token,
            sort_text=self.sort_key,
        )
