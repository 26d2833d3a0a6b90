"""
Constants and configuration values for the Notion export system.
"""

# Notion's internal API, used by the web client for space exports
NOTION_API_BASE_URL = "https://www.notion.so/api/v3"
ENQUEUE_TASK_ENDPOINT = "enqueueTask"
GET_TASKS_ENDPOINT = "getTasks"
EXPORT_EVENT_NAME = "exportSpace"

# Export defaults
DEFAULT_EXPORT_FORMAT = "markdown"
DEFAULT_LOCALE = "en"
DEFAULT_TIME_ZONE = "Europe/Berlin"
DEFAULT_POLL_INTERVAL_SECONDS = 2
DEFAULT_WORKSPACE_DIR = "workspace"

# Remote task states
TASK_STATE_SUCCESS = "success"
TASK_STATE_FAILURE = "failure"

# HTTP settings
REQUEST_TIMEOUT_SECONDS = 30
DOWNLOAD_TIMEOUT_SECONDS = (10, 60)
DOWNLOAD_CHUNK_SIZE = 64 * 1024

# " " + 32 hex characters appended by the exporter to every page name
HASH_SUFFIX_LENGTH = 33
EXPORT_ROOT_NAME = "export"
