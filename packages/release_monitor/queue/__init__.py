"""
Queue Module.

Provides Redis Streams-based publishing of detected releases.
"""

from .producer import QueueProducer

__all__ = ["QueueProducer"]
