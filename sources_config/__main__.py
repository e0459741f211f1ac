"""Startup check: resolve the service endpoints and print them as JSON.

    python -m sources_config

Exits 1 with the error document on stdout when the configuration is
incomplete, so a container entrypoint can abort before the service starts.
"""

from __future__ import annotations

import json
import sys

from sources_config.core.errors import ConfigError
from sources_config.resolver import load_endpoints


def main() -> int:
    try:
        endpoints = load_endpoints()
    except ConfigError as exc:
        print(json.dumps(exc.to_dict()))
        return 1
    print(endpoints.model_dump_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
