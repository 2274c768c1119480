# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKPULSE_APP_NAME": "App display name (default: taskpulse).",
    "TASKPULSE_LOG_LEVEL": "Log file level (default: INFO). The console only shows warnings.",
    # Paths (gitignored)
    "TASKPULSE_DATA_DIR": "Local data directory (default: .local/taskpulse).",
    "TASKPULSE_STORE_PATH": "Key-value JSON file (default: <data_dir>/storage.json).",
    "TASKPULSE_STORAGE_KEY": "Key the task list is stored under (default: react-todo-list).",
    "TASKPULSE_PERSIST": "Keep tasks on disk (true/false, default: true). When false the list lives in memory only.",
    # Feedback
    "TASKPULSE_SOUND": "Play feedback sounds (true/false, default: true).",
    "TASKPULSE_SAMPLE_RATE": "Audio output sample rate (default: 44100).",
    "TASKPULSE_MASTER_VOLUME": "Multiplier applied to every cue (0..4, default: 1.0).",
    # Console
    "TASKPULSE_BOOT_ANIMATION": "Show the start-up progress line (true/false, default: true).",
}
