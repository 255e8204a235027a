# Integration Module
"""
Event logging for digest computations, file hashing and verification.
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    from . import event_logger
    return getattr(event_logger, name)

__all__ = [
    'EventType',
    'DigestEvent',
    'EventLogger',
    'create_event_logger',
]
