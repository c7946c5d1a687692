"""
Default configuration values for subsetcss.

Centralized defaults that can be overridden by environment variables,
client settings or the subset configuration file itself.
"""

import copy
from typing import Any, Dict

# Subset configuration file looked up relative to the workspace root
DEFAULT_CONFIG_FILENAME = ".subsetcss.json"

# Client settings section requested through workspace/configuration
SETTINGS_SECTION = "subsetcss"

# Global default settings
DEFAULT_SETTINGS = {
    # Logging
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    }
}

# Starter configuration written by `subsetcss init`
EXAMPLE_SUBSET_CONFIG = {
    "subsets": {
        "color": ["#000", "#fff", "rebeccapurple"],
        "background-color": ["#fff", "#f5f5f5"],
        "font-size": ["12px", "14px", "16px", "20px"],
        "display": ["block", "flex", "grid", "none"]
    },
    "@media": [
        {
            "params": {"max-width": ["600px"]},
            "subsets": {
                "font-size": ["12px", "14px"]
            }
        }
    ]
}


def get_example_subset_config() -> Dict[str, Any]:
    """Get a copy of the starter subset configuration"""
    return copy.deepcopy(EXAMPLE_SUBSET_CONFIG)
