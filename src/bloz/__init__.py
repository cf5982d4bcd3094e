"""
Bloz - Link Moderation Bot for Discord

Bloz watches configured channels and removes messages that break the
channel's link policy, answering with a short persona-voiced warning that
cleans itself up a few seconds later.

Core Components:

- **Link Detection**: URL-like token detection and hostname extraction from
  message text and attachment URLs
- **Moderation Engine**: Per-channel modes (off, links-only, no-links), an
  optional domain whitelist and bypass roles, with a selectable per-guild
  link policy
- **Guild Settings**: JSON-backed per-server configuration managed through
  slash commands
- **Cleanup**: On-demand sweep of recent channel history

Usage:
    from bloz.main import main
    main()  # Starts the bot
"""
