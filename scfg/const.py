"""
Package constants and metadata.
"""

# Package info
APP_NAME = "scfg"
APP_VERSION = "0.1.0"
APP_URL = "https://codeberg.org/emersion/scfg"

# Parser limits
MAX_DEPTH = 1000

# Canonical output
DEFAULT_INDENT = "    "
DECLARATION_OPERATOR = "="
