"""Objects, key store with expiry, integer and reference queues and stacks, query executor and RESP codec for an in-memory key-value store."""

__version__ = "0.1.0"
__all__ = [
    "executor",
    "objects",
    "queueint",
    "queueref",
    "resp",
    "stackint",
    "stackref",
    "store",
    "wildcard",
]