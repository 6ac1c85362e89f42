"""
sitepub — Static-site publishing pipeline.

Builds a Hugo site in draft and production variants, publishes each
build to a git-hosted repository and to an object-storage bucket, and
reports the outcome through push notifications.
"""

__version__ = "0.3.0"
