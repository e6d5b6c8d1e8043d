"""Entry point for running stratum-ping from a source checkout."""

from __future__ import annotations

import sys

from stratum_ping.cli import main


if __name__ == "__main__":
    sys.exit(main())
