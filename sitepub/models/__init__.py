"""
Data models for sitepub
"""

from .workflow_config import (
    DeployConfig,
    GithubDeployConfig,
    HugoConfig,
    OssDeployConfig,
    OssSyncConfig,
    WorkflowConfig,
)

__all__ = [
    'WorkflowConfig',
    'HugoConfig',
    'DeployConfig',
    'GithubDeployConfig',
    'OssDeployConfig',
    'OssSyncConfig',
]
