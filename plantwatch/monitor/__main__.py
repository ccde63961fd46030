"""Condition monitor entrypoint.

Periodically checks every tenant's plants against their species' ideal
conditions and publishes alert batches to each tenant's channel.

Usage: python -m plantwatch.monitor
"""

from plantwatch.monitor.service import main

if __name__ == "__main__":
    main()
