"""
Language server for subsetcss.

Serves textDocument/completion over stdio (or TCP) using pygls.
"""

from .models import DocumentSettings
from .server import SubsetLanguageServer, create_server, main

__all__ = [
    "DocumentSettings",
    "SubsetLanguageServer",
    "create_server",
    "main",
]
