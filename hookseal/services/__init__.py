"""
Services module for hookseal.

Contains clients that talk to other parties over HTTP.
"""

from hookseal.services.webhook_client import WebhookClient

__all__ = ["WebhookClient"]
