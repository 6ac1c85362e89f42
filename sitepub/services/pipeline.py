"""
Publishing pipeline.

Sequences the hugo build, the git publish and the object-storage publish
for the draft variant and then the production variant, and reports the
outcome through push notifications.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Optional

from ..models.workflow_config import DeployConfig, HugoConfig, WorkflowConfig
from ..utils.config_loader import ConfigLoader, mask_secret
from ..utils.file_utils import remove_dir
from ..utils.logger import get_logger, log_step
from .command_runner import CommandRunner, SubprocessRunner
from .github_publisher import GithubPublisher
from .hugo_fetcher import HugoFetcher
from .mem_probe import MemProbe
from .notification_service import (
    SOUND_BIKE,
    SOUND_FALLING,
    SOUND_MAGIC,
    Notifier,
    PushoverNotifier,
)
from .oss_publisher import OssPublisher

log = get_logger(__name__)

PUBLIC_DIR_NAME = "public"


def default_notifier() -> Notifier:
    """Pushover notifier using credentials from the environment."""
    return PushoverNotifier(*ConfigLoader.pushover_credentials())


class Pipeline:
    """Runs the publishing workflow for one site directory.

    Every collaborator is injectable so tests can replace processes,
    notifications and storage with fakes.

    Args:
        site_dir: Hugo site root (holds workflow.toml and receives public/)
        config_path: Explicit workflow.toml path
        runner: Command runner for hugo and git
        notifier_factory: Returns the notifier; called only when a
            message is actually sent
        oss_publisher_factory: Builds the object-storage publisher
        github_publisher_factory: Builds the git publisher
    """

    def __init__(
        self,
        site_dir=".",
        config_path=None,
        runner: Optional[CommandRunner] = None,
        notifier_factory: Callable[[], Notifier] = default_notifier,
        oss_publisher_factory: Callable[..., OssPublisher] = OssPublisher,
        github_publisher_factory: Callable[..., GithubPublisher] = GithubPublisher,
    ):
        self.site_dir = Path(site_dir)
        self.config_path = ConfigLoader.get_config_path(self.site_dir, config_path)
        self.runner = runner or SubprocessRunner()
        self.notifier_factory = notifier_factory
        self.oss_publisher_factory = oss_publisher_factory
        self.github_publisher_factory = github_publisher_factory

    @property
    def public_dir(self) -> Path:
        return self.site_dir / PUBLIC_DIR_NAME

    # ── Notifications ──────────────────────────────────────────────────

    def notify(self, message: str, sound: str) -> None:
        self.notifier_factory().send(message, sound)

    @contextmanager
    def alert_on_error(self, enabled: bool = True):
        """Send a failure notification for any exception, then re-raise it.

        A failure to deliver the notification is logged; the original
        exception is the one that propagates.
        """
        try:
            yield
        except Exception as e:
            if enabled:
                try:
                    self.notify(f"Workflow failed! Reason:\r\n{e}", SOUND_FALLING)
                except Exception as notify_error:
                    log.error("Could not send failure notification: %s", notify_error)
            raise

    # ── Steps ──────────────────────────────────────────────────────────

    def load_config(self) -> WorkflowConfig:
        return ConfigLoader.load_workflow_config(self.config_path)

    def resolve_hugo(self, config: HugoConfig) -> Path:
        fetcher = HugoFetcher(config.version, install_dir=config.install_dir, runner=self.runner)
        return fetcher.resolve()

    def build_site(self, hugo, for_draft: bool) -> None:
        """Render the site into public/ with the given hugo binary."""
        log.info("Building %s variant with hugo...", "draft" if for_draft else "production")
        remove_dir(self.public_dir)

        args = [str(hugo)]
        base_url = None
        if for_draft:
            base_url = ConfigLoader.draft_base_url()
            args += ["-b", base_url, "-D", "-F"]

        log.info("Running: hugo %s", mask_secret(" ".join(args[1:]), base_url).strip())
        self.runner.check(args, hint="hugo", cwd=self.site_dir)

    def deploy_variant(self, hugo, deploy: DeployConfig, for_draft: bool) -> None:
        """Build one variant and publish it to both targets."""
        variant = "draft" if for_draft else "production"

        with log_step(log, f"hugo build ({variant})"):
            self.build_site(hugo, for_draft)

        with log_step(log, f"github deploy ({variant})"):
            github = self.github_publisher_factory(deploy.github, self.runner, self.site_dir)
            github.publish(self.public_dir, for_draft)

        with log_step(log, f"oss deploy ({variant})"):
            oss = self.oss_publisher_factory(deploy.oss)
            uploaded = oss.publish(self.public_dir, for_draft)
            log.info("Uploaded %d object(s)", uploaded)

    # ── Subcommands ────────────────────────────────────────────────────

    def start(self) -> None:
        """Announce that a workflow run is beginning."""
        self.notify("Workflow started!", SOUND_BIKE)

    def upgrade_hugo(self) -> Path:
        """Make sure the configured hugo version is installed."""
        config = self.load_config()
        return self.resolve_hugo(config.hugo)

    def run(self) -> float:
        """Build and publish the draft and production variants.

        Returns:
            Peak resident memory during the deploys, in MB

        Raises:
            SitepubError: The first failure, after it has been notified
        """
        with self.alert_on_error():
            config = self.load_config()
            hugo = self.resolve_hugo(config.hugo)
            deploy = ConfigLoader.apply_deploy_secrets(config.deploy)

        probe = MemProbe()
        try:
            for for_draft in (True, False):
                log.info("================")
                with self.alert_on_error():
                    self.deploy_variant(hugo, deploy, for_draft)
        finally:
            peak_mb, _ = probe.join_and_get_mb_sample()

        self.notify(f"Workflow succeeded!\r\nPeak memory: {peak_mb} MB", SOUND_MAGIC)
        return peak_mb
