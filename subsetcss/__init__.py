"""
subsetcss - Completion of allowed CSS values from a project subset config.

Offers only the values a project's subset configuration allows for the
property under the cursor, as a language server and a command line.
"""

from core import __version__

__author__ = "subsetcss Team"

__all__ = [
    "__version__",
]
