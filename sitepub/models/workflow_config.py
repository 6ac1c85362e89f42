"""
Workflow configuration models (workflow.toml)
"""
from typing import Any, Dict, List, Optional

from ..exceptions import ConfigError


def _require(data: Dict[str, Any], key: str, section: str):
    """Return ``data[key]`` or raise ConfigError naming the missing key."""
    if not isinstance(data, dict):
        raise ConfigError(f"[{section}] must be a table")
    value = data.get(key)
    if value is None or value == "":
        raise ConfigError(f"Missing required key '{key}' in [{section}]")
    return value


def _string_list(data: Dict[str, Any], key: str, section: str) -> List[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' in [{section}] must be a list of strings")
    return list(value)


class HugoConfig:
    """
    Build-tool settings.
    """

    def __init__(self, version: str, install_dir: Optional[str] = None):
        """
        Args:
            version: Hugo release to use, without the leading ``v``
            install_dir: Directory that holds the hugo binary
        """
        self.version = version.lstrip("v")
        self.install_dir = install_dir

    def to_dict(self):
        data = {"version": self.version}
        if self.install_dir:
            data["install_dir"] = self.install_dir
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            version=str(_require(data, "version", "hugo")),
            install_dir=data.get("install_dir"),
        )


class GithubDeployConfig:
    """
    Git-hosted publish target. Credentials are filled from the environment.
    """

    def __init__(self, username, org, repo, access_token=None,
                 user_email=None, user_name=None):
        self.username = username
        self.org = org
        self.repo = repo
        self.access_token = access_token
        self.user_email = user_email
        self.user_name = user_name

    def clone_url(self) -> str:
        """Authenticated HTTPS clone URL (contains the access token)."""
        return (
            f"https://{self.username}:{self.access_token}"
            f"@github.com/{self.org}/{self.repo}.git"
        )

    def to_dict(self):
        return {"username": self.username, "org": self.org, "repo": self.repo}

    @classmethod
    def from_dict(cls, data):
        section = "deploy.github"
        return cls(
            username=_require(data, "username", section),
            org=_require(data, "org", section),
            repo=_require(data, "repo", section),
        )


class OssSyncConfig:
    """
    What to publish to object storage.

    ``files`` are uploaded individually; each entry of ``dirs`` is
    mirrored (wiped and re-uploaded) under the same key prefix. Both are
    relative to the build output directory.
    """

    def __init__(self, root: str = "/", files=None, dirs=None):
        self.root = root
        self.files = files if files is not None else []
        self.dirs = dirs if dirs is not None else []

    def to_dict(self):
        return {"root": self.root, "files": self.files, "dirs": self.dirs}

    @classmethod
    def from_dict(cls, data):
        section = "deploy.oss.sync"
        return cls(
            root=str(_require(data, "root", section)),
            files=_string_list(data, "files", section),
            dirs=_string_list(data, "dirs", section),
        )


class OssDeployConfig:
    """
    Object-storage publish target. Keys and endpoints come from the environment.
    """

    def __init__(self, sync: OssSyncConfig, access_key_id=None, access_key_secret=None,
                 region=None, max_concurrency=None, join_timeout=None):
        self.sync = sync
        self.access_key_id = access_key_id
        self.access_key_secret = access_key_secret
        self.region = region
        self.max_concurrency = max_concurrency
        self.join_timeout = join_timeout

    def to_dict(self):
        data = {"sync": self.sync.to_dict()}
        if self.region:
            data["region"] = self.region
        if self.max_concurrency is not None:
            data["max_concurrency"] = self.max_concurrency
        if self.join_timeout is not None:
            data["join_timeout"] = self.join_timeout
        return data

    @classmethod
    def from_dict(cls, data):
        sync = OssSyncConfig.from_dict(_require(data, "sync", "deploy.oss"))

        max_concurrency = data.get("max_concurrency")
        if max_concurrency is not None and (
            not isinstance(max_concurrency, int) or max_concurrency < 1
        ):
            raise ConfigError("'max_concurrency' in [deploy.oss] must be a positive integer")

        join_timeout = data.get("join_timeout")
        if join_timeout is not None and (
            not isinstance(join_timeout, (int, float)) or join_timeout <= 0
        ):
            raise ConfigError("'join_timeout' in [deploy.oss] must be a positive number")

        return cls(
            sync=sync,
            region=data.get("region"),
            max_concurrency=max_concurrency,
            join_timeout=join_timeout,
        )


class DeployConfig:
    """Both publish targets."""

    def __init__(self, github: GithubDeployConfig, oss: OssDeployConfig):
        self.github = github
        self.oss = oss

    def to_dict(self):
        return {"github": self.github.to_dict(), "oss": self.oss.to_dict()}

    @classmethod
    def from_dict(cls, data):
        return cls(
            github=GithubDeployConfig.from_dict(_require(data, "github", "deploy")),
            oss=OssDeployConfig.from_dict(_require(data, "oss", "deploy")),
        )


class WorkflowConfig:
    """Top-level workflow.toml contents."""

    def __init__(self, hugo: HugoConfig, deploy: DeployConfig):
        self.hugo = hugo
        self.deploy = deploy

    def to_dict(self):
        return {"hugo": self.hugo.to_dict(), "deploy": self.deploy.to_dict()}

    @classmethod
    def from_dict(cls, data):
        return cls(
            hugo=HugoConfig.from_dict(_require(data, "hugo", "root")),
            deploy=DeployConfig.from_dict(_require(data, "deploy", "root")),
        )
