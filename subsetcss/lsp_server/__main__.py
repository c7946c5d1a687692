"""
Language server entry point for subsetcss.

Usage:
    python -m subsetcss.lsp_server

Environment Variables:
    SUBSETCSS_CONFIG_PATH: Subset config file relative to the workspace root
    SUBSETCSS_WATCH_CONFIG: Watch the config file on disk (default: false)
    SUBSETCSS_LOG_LEVEL: Logging level (default: INFO)
    SUBSETCSS_LOG_FILE: Optional log file
"""

import sys

from subsetcss.lsp_server.server import main


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
