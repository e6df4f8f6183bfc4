"""Entry point for `python -m flystate`.

Usage:
    FLY_API_TOKEN=... python -m flystate
"""

from __future__ import annotations

import asyncio

from flystate.app import main

asyncio.run(main())
