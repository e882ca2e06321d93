"""Allow ``python -m release_ip``."""

from __future__ import annotations

from release_ip.cli.app import main

if __name__ == "__main__":
    main()
