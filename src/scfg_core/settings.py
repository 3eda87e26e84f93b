from __future__ import annotations

import os


LOG_LEVEL = os.environ.get("SCFG_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

PROMPT = os.environ.get("SCFG_PROMPT", "SCFG> ")
