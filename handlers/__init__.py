"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler parses and validates the command
arguments, calls the Service stored in ``context.bot_data`` by main.py,
and sends the response back to the user. No business logic lives here.
"""
