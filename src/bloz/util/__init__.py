"""
Utility functions and helpers for Bloz.

This package provides reusable utilities:

- **logger.py**: Centralized logging configuration with colored console output,
  a per-session log file, and suppression of noisy Discord networking loggers.
  Uses prompt_toolkit for console output.

- **discord_utils.py**: Low-level Discord API helpers including permission
  checks, best-effort message deletion, and conversion of Discord messages into
  the normalized moderation message structure. All functions are stateless.
"""
