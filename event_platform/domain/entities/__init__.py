# Domain Entities
from .base import (
    Entity,
    AggregateRoot,
    DomainEvent,
    ValueObject,
    utc_now,
)

__all__ = [
    'Entity',
    'AggregateRoot',
    'DomainEvent',
    'ValueObject',
    'utc_now',
]
