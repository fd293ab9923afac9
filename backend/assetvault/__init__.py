"""
Asset Vault: multi-tenant credential and asset storage with expiration reminders
"""

__version__ = "1.0.0"
