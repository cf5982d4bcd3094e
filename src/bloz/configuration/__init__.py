"""
Configuration management for Bloz.

This package handles all application and guild-level configuration:

- **app_configuration.py**: YAML configuration loader for global settings
  (persona name, warning lifetime, data file location, cleanup defaults) with
  environment variable overrides. Falls back gracefully on missing or
  malformed config files.

- **guild_settings.py**: Per-guild configuration persistence layer. Keeps
  channel modes, the domain whitelist, bypass roles and the link policy in
  memory and flushes the whole store to a JSON file after every change.
"""
