# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.

Note: the bundled sample data path is <data_dir>/tasks.json; when it is missing
(or contains no records) the app generates TASKGLITCH_SEED_COUNT sample tasks.
"""

ENV_VARS = {
    # App / logging
    "TASKGLITCH_APP_NAME": "App display name (default: taskglitch).",
    "TASKGLITCH_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TASKGLITCH_CONSOLE_ENABLED": "Run the interactive console (true/false). Off prints a summary.",
    # Initial load
    "TASKGLITCH_TASKS_SOURCE": "URL (http/https) or JSON file with raw task records.",
    "TASKGLITCH_SEED_COUNT": "Number of generated sample tasks when the source is empty (default: 50).",
    "TASKGLITCH_FETCH_TIMEOUT_SECONDS": "HTTP timeout for the initial fetch (default: 10).",
    # Paths (gitignored)
    "TASKGLITCH_DATA_DIR": "Local data directory (default: .local/taskglitch).",
    "TASKGLITCH_EXPORT_PATH": "Default CSV export path (default: <data_dir>/tasks.csv).",
}
