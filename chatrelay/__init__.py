"""
Chat Relay Service
Relays Twitch chatter listings as a flat, role-normalized audience list
"""

__version__ = "0.1.0"
