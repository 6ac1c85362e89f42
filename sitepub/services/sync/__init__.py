"""
Remote directory synchronization engine.

- :mod:`local_files`  — local enumeration, reads and key derivation
- :mod:`upload_tasks` — concurrent uploads with a join barrier
- :mod:`mirror`       — delete-then-reupload directory mirroring
"""
from ..storage.content_type import resolve_content_type
from .mirror import DirectoryMirror, MirrorResult, mirror_directory
from .upload_tasks import DEFAULT_MAX_UPLOAD_WORKERS, UploadTask, UploadTaskSet

__all__ = [
    'resolve_content_type',
    'DirectoryMirror',
    'MirrorResult',
    'mirror_directory',
    'UploadTask',
    'UploadTaskSet',
    'DEFAULT_MAX_UPLOAD_WORKERS',
]
