"""Test package for Disco GPT.

Puts ``src`` on ``sys.path`` at import time so the ``disco_gpt`` package
can be imported from a source checkout without installing it first.
"""

import sys
from pathlib import Path

src_path = Path(__file__).resolve().parents[1] / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))
