"""
Run a kenx project from the current directory: `python -m kenx`.
"""

import asyncio
import contextlib

from kenx.main import run


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run())
