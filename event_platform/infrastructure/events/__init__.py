"""
Domain event publishing.
"""
from .logging_publisher import LoggingEventPublisher

__all__ = ['LoggingEventPublisher']
