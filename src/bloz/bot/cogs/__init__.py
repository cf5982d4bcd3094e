"""
Cogs package for the Bloz bot.
Contains organized command groups and event handlers.
Each module defines a cog class and a setup function to register it with the bot.
The cogs are loaded explicitly in main.py to avoid dynamic imports.
"""
