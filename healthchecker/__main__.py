"""Entry point for `python -m healthchecker`.

Usage:
    python -m healthchecker
"""

from __future__ import annotations

import asyncio

from healthchecker.app import main

asyncio.run(main())
