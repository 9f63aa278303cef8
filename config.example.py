# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKODORO_APP_NAME": "App display name (default: taskodoro).",
    "TASKODORO_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "TASKODORO_DATA_DIR": "Local data directory for logs and snapshot (default: .local/taskodoro).",
    "TASKODORO_SNAPSHOT_PATH": "Snapshot JSON path (default: <data_dir>/tasks.json).",
    # Server
    "TASKODORO_SERVER_ENABLED": "Run the HTTP + Socket.IO server (true/false).",
    "TASKODORO_HOST": "Bind address (default: 127.0.0.1).",
    "TASKODORO_PORT": "Port (default: $PORT or 3001).",
    "TASKODORO_CORS_ORIGINS": "Comma/space separated allowed origins (default: *).",
    # Pomodoro
    "TASKODORO_TICK_INTERVAL_SECONDS": "Seconds between timer ticks (default: 1.0).",
    # Console connector
    "TASKODORO_CONSOLE_ENABLED": "Enable console chat REPL (true/false).",
    "TASKODORO_CONSOLE_USER": "Username the console chats as (default: streamer).",
    "TASKODORO_MODERATORS": "Users allowed to run !cleardone (default: the console user).",
}
