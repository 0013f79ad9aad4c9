"""Constants for taskboard.

This module centralizes default values used throughout the engine.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# Derived progress
PROGRESS_COMPLETE = 100

# Remote call deadline (seconds) before an in-flight update is rolled back
DEFAULT_REMOTE_TIMEOUT_SEC = float(os.getenv("TASKBOARD_REMOTE_TIMEOUT_SEC", "15"))

# HTTP timeout per request (seconds)
DEFAULT_HTTP_TIMEOUT_SEC = float(os.getenv("TASKBOARD_HTTP_TIMEOUT_SEC", "10"))

# Display handle for headers with no resolvable assignee
UNASSIGNED_LABEL = "Unassigned"
