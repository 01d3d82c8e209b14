from .base import DefaultServiceAttributeHandler, ServiceAttributeDefinition
from .logging_kafka import KafkaServiceAttributeHandler

__all__ = [
    "DefaultServiceAttributeHandler",
    "KafkaServiceAttributeHandler",
    "ServiceAttributeDefinition",
]
