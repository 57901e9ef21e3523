"""CLI entry point for Disco GPT.

Runs the bot from a source checkout without installing the package:

.. code-block:: bash

    # Register /gpt in one guild and serve it until Ctrl+C
    python main.py --guild 1234567890

    # Register globally and keep the command after shutdown
    python main.py --no-rmcmd

Settings not given on the command line are read from the environment or a
``.env`` file (``DISCORD_BOT_TOKEN``, ``OPENAI_API_KEY``, ...).
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from disco_gpt.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
