"""
uritpl command line interface.

Usage:
    uritpl expand <template> [-v name=value ...] [--vars FILE]
    uritpl parse <template> [--json]
    uritpl vars <template>
"""

from .. import __version__

__cli_name__ = "uritpl"
