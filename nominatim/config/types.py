"""Type definitions for the Nominatim client configuration."""

import sys
from typing import List

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict

# Keys contain dashes, so functional syntax is the only option
NominatimConfig = TypedDict(
    "NominatimConfig",
    {
        "base-url": str,
        "timeout": float,
        "user-agent": str,
        "accept-language": List[str],
        "abort-on-cancel": bool,
    },
    total=False,
)
"""[nominatim] table of the config file."""
