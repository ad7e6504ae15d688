"""
JeevesBot - personal calendar assistant
Telegram bot, REST API and CLI over a flat-file appointment store.
"""

__version__ = "1.0.0"
