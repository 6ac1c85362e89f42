"""
Publishing services for sitepub.

Provides modular service packages:
- sync/ - Directory mirroring engine with concurrent uploads
- storage/ - Storage accessor interface and bucket/local backends
- pipeline - Build → git publish → object-storage publish orchestration
"""
from .command_runner import CommandResult, CommandRunner, SubprocessRunner
from .notification_service import Notifier, PushoverNotifier
from .pipeline import Pipeline

__all__ = [
    'Pipeline',
    'CommandRunner',
    'CommandResult',
    'SubprocessRunner',
    'Notifier',
    'PushoverNotifier',
]
