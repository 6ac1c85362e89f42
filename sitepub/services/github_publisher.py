"""
Git-hosted publishing of the built site.
"""
from pathlib import Path

from ..exceptions import PublishError
from ..models.workflow_config import GithubDeployConfig
from ..utils.config_loader import mask_secret
from ..utils.file_utils import copy_dir_into, remove_dir
from ..utils.logger import get_logger
from .command_runner import CommandRunner

log = get_logger(__name__)

DRAFT_BRANCH = "draft"


class GithubPublisher:
    """Commits a build output directory into a GitHub repository.

    The repository is cloned into *work_dir*, its ``public`` directory
    is replaced with the new build, and the result is committed and
    pushed. The clone is removed afterwards.

    Args:
        config: Repository settings with credentials filled in
        runner: Command runner used for git
        work_dir: Directory the clone is created in
    """

    def __init__(self, config: GithubDeployConfig, runner: CommandRunner, work_dir):
        self.config = config
        self.runner = runner
        self.work_dir = Path(work_dir)

    def _git(self, *args, cwd=None):
        return self.runner.check(["git", *args], hint="git", cwd=cwd)

    def publish(self, public_dir, for_draft: bool) -> bool:
        """Publish *public_dir* to the draft or main branch.

        Args:
            public_dir: Freshly built site directory
            for_draft: Use the draft branch instead of the default branch

        Returns:
            True if a commit was pushed, False if there was nothing to commit

        Raises:
            PublishError: If credentials are missing or *public_dir* does not exist
            CommandError: If a git command fails
        """
        config = self.config
        public_dir = Path(public_dir)
        log.info("Deploying github %s", "draft" if for_draft else "main")

        if not (config.access_token and config.user_email and config.user_name):
            raise PublishError("GitHub credentials have not been loaded")
        if not public_dir.is_dir():
            raise PublishError(f"Build output not found: {public_dir}")

        url = config.clone_url()
        repo_dir = self.work_dir / config.repo
        remove_dir(repo_dir)

        log.info("Running: git clone %s", mask_secret(url, config.access_token))
        self._git("clone", url, cwd=self.work_dir)

        try:
            log.info("Configuring git...")
            self._git("config", "user.email", config.user_email, cwd=repo_dir)
            self._git("config", "user.name", config.user_name, cwd=repo_dir)

            if for_draft:
                log.info("Running: git checkout %s", DRAFT_BRANCH)
                self._git("checkout", DRAFT_BRANCH, cwd=repo_dir)

            remove_dir(repo_dir / public_dir.name)
            log.info("Copying %s...", public_dir.name)
            copy_dir_into(public_dir, repo_dir)

            log.info("Committing...")
            self._git("add", ".", cwd=repo_dir)

            commit = self.runner.run(["git", "commit", "-m", "Deploy"], cwd=repo_dir)
            if not commit.success:
                log.warning("Nothing to commit!")
                return False

            log.info("Running: git push")
            self._git("push", cwd=repo_dir)
            return True
        finally:
            log.info("Cleaning up %s...", config.repo)
            remove_dir(repo_dir)
