#!/usr/bin/env python3
"""
Repository mirror tool for GitHub and GitLab
"""

import argparse
import logging
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from dotenv import load_dotenv
from loguru import logger
from rich_argparse import ArgumentDefaultsRichHelpFormatter
from tqdm import tqdm

from .base import RepositoryManager, mask_secret
from .config import RUN_ONCE, BackupConfig
from .errors import ConfigurationError, DiscoveryError, RepoMirrorError, SyncError
from .github_manager import GitHubManager
from .gitlab_manager import GitLabManager
from .local_mirror import LocalMirror
from .notifier import create_notifier
from .report import BackupReport, CredentialReport

ManagerFactory = Callable[[str], RepositoryManager]


class _LoguruHandler(logging.Handler):
    """Forwards standard logging records from the library modules to loguru"""

    def emit(self, record: logging.LogRecord):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(verbose: bool = False, log_file: str = "repo-mirror.log"):
    """Setup console and file logging with loguru"""

    # Remove default loguru handler
    logger.remove()

    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)
    log_file_path = log_dir / log_file

    log_level = "DEBUG" if verbose else "INFO"

    console_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<level>{message}</level>"
    )

    logger.add(sys.stdout, format=console_format, level=log_level, colorize=True)

    file_format = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"

    logger.add(
        log_file_path,
        format=file_format,
        level=log_level,
        rotation="10 MB",
        retention="30 days",
        compression="zip",
        encoding="utf-8",
    )

    logging.basicConfig(
        handlers=[_LoguruHandler()],
        level=logging.DEBUG if verbose else logging.INFO,
        force=True,
    )

    logger.info("[CONFIG] Logging configured")
    logger.debug(f"Log file: {log_file_path}")

    return logger


# Configure basic loguru logging (will be reconfigured in main())
logger.remove()
logger.add(sys.stdout, level="INFO", colorize=True)


class RepoMirrorOrchestrator:
    def __init__(
        self,
        config: BackupConfig,
        mirror: Optional[LocalMirror] = None,
        notifier=None,
        manager_factories: Optional[Dict[str, ManagerFactory]] = None,
    ):
        self.config = config
        self.mirror = mirror or LocalMirror(config.repos_dir)
        self.notifier = notifier or create_notifier(
            config.telegram_bot_token, config.telegram_chat_id
        )
        self.manager_factories = manager_factories or {
            "github": lambda token: GitHubManager(
                token, api_url=config.github_api_url
            ),
            "gitlab": lambda token: GitLabManager(token, url=config.gitlab_url),
        }

    def credentials(self) -> List[Tuple[str, str]]:
        """(platform, token) pairs in processing order"""
        tokens = {
            "github": self.config.github_tokens,
            "gitlab": self.config.gitlab_tokens,
        }
        return [
            (platform, token)
            for platform in self.manager_factories
            for token in tokens.get(platform, [])
            if token
        ]

    def notify(self, message: str):
        try:
            self.notifier.notify(message)
        except Exception as e:
            logger.warning(f"[NOTIFY] Notification failed: {type(e).__name__}: {e}")

    def run_pass(self) -> BackupReport:
        """Discover and mirror every repository of every configured credential"""
        report = BackupReport()
        credentials = self.credentials()

        logger.info(
            f"[START] Starting mirror pass for {len(credentials)} credential(s)..."
        )

        for platform, token in credentials:
            report.credentials.append(self.backup_credential(platform, token))

        self.log_summary(report)
        return report

    def backup_credential(self, platform: str, token: str) -> CredentialReport:
        result = CredentialReport(platform=platform, account=mask_secret(token))

        logger.info(
            f"[CONNECT] Connecting to {platform.upper()} ({result.account})..."
        )

        try:
            manager = self.manager_factories[platform](token)
            discovery = manager.discover()
        except RepoMirrorError as e:
            result.error = e
        except Exception as e:
            result.error = DiscoveryError(f"{type(e).__name__}: {e}")

        if result.error is not None:
            logger.error(
                f"[ERROR] Failed to fetch repos from {platform.upper()} ({result.account}): {result.error}"
            )
            self.notify(
                f"Error getting {platform} repositories for {result.account}: {result.error}"
            )
            return result

        result.account = discovery.account
        result.discovered = discovery.clone_urls
        result.warnings = list(discovery.warnings)

        for warning in result.warnings:
            self.notify(f"Warning on {platform} ({result.account}): {warning}")

        logger.info(
            f"[OK] Found {len(result.discovered)} repositories on {platform.upper()} ({result.account})"
        )
        for url in result.discovered:
            logger.debug(f"  - {url}")

        self.sync_repositories(result, manager.clone_credential)
        return result

    def sync_repositories(self, result: CredentialReport, credential: str):
        urls = result.discovered
        workers = self.config.workers

        if workers > 1 and len(urls) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(self.sync_repository, url, credential): url
                    for url in urls
                }
                with tqdm(total=len(urls), desc="Mirroring", unit="repo") as pbar:
                    for future in as_completed(futures):
                        self._record(result, futures[future], future.result())
                        pbar.update(1)
                        pbar.set_postfix(
                            {"OK": len(result.synced), "FAIL": len(result.failures)}
                        )
        else:
            with tqdm(urls, desc="Mirroring", unit="repo") as pbar:
                for url in pbar:
                    self._record(result, url, self.sync_repository(url, credential))
                    pbar.set_postfix(
                        {"OK": len(result.synced), "FAIL": len(result.failures)}
                    )

    def sync_repository(self, url: str, credential: str) -> Optional[SyncError]:
        """Mirror one repository, returning the error instead of raising it"""
        try:
            self.mirror.sync(url, credential)
        except SyncError as e:
            return e
        except Exception as e:
            return SyncError(url, f"{type(e).__name__}: {e}")
        return None

    def _record(self, result: CredentialReport, url: str, error: Optional[SyncError]):
        if error is None:
            result.synced.append(url)
            return

        result.failures.append(error)
        logger.error(f"[FAIL] Error mirroring repository {url}")
        self.notify(f"Error mirroring repository {url}: {error.output[:500]}")

    def log_summary(self, report: BackupReport):
        logger.info("=" * 60)
        logger.info("[SUMMARY] MIRROR SUMMARY")
        logger.info("=" * 60)
        logger.info(f"[TOTAL] Credentials processed: {len(report.credentials)}")
        logger.info(f"[TOTAL] Repositories discovered: {report.discovered}")
        logger.info(f"[SUCCESS] Repositories mirrored: {report.synced}")
        logger.info(f"[FAIL] Repositories failed: {report.failed}")

        for error in report.errors:
            logger.error(f"[ERROR] {error}")
        for warning in report.warnings:
            logger.warning(f"[WARN] {warning}")
        for credential in report.credentials:
            for failure in credential.failures:
                logger.error(f"[FAIL] {failure.url}")

        if report.has_failures:
            logger.warning("[WARN] Pass finished with errors - check logs for details")
        else:
            logger.info("[COMPLETE] All repositories mirrored successfully!")


def run_forever(
    orchestrator: RepoMirrorOrchestrator,
    interval_minutes: int,
    sleep: Callable[[float], None] = time.sleep,
    max_passes: Optional[int] = None,
) -> BackupReport:
    """
    Run mirror passes until interrupted.

    An interval of zero or less runs a single pass. max_passes bounds the
    loop for callers that do not want to run indefinitely.
    """
    passes = 0
    while True:
        report = orchestrator.run_pass()
        passes += 1

        if interval_minutes <= 0:
            return report
        if max_passes is not None and passes >= max_passes:
            return report

        logger.info(f"[SCHEDULE] Next pass in {interval_minutes} minute(s)")
        sleep(interval_minutes * 60)


def get_env_default(env_var: str, fallback=None):
    """Get value from environment or .env file"""
    return os.getenv(env_var, fallback)


def main(argv: Optional[List[str]] = None):
    # Load environment variables first (before parsing args)
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="[bold blue]Repository Mirror Tool[/bold blue] - Mirror every GitHub and GitLab repository an account can see",
        epilog="""
[bold blue]Configuration (environment or .env):[/bold blue]
  GITHUB_TOKENS / GITLAB_TOKENS   comma-separated credentials
  REPOS_DIR                       mirror root (default ./repos)
  REPEAT_INTERVAL                 minutes between passes (-1 runs once)
  TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID   failure notifications
        """,
        formatter_class=ArgumentDefaultsRichHelpFormatter,
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )
    parser.add_argument(
        "--log-file",
        default=get_env_default("LOG_FILE", "repo-mirror.log"),
        metavar="FILE",
        help="Log file name (env: LOG_FILE)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single pass regardless of REPEAT_INTERVAL",
    )

    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = BackupConfig.from_env()
    except ConfigurationError as e:
        logger.error(f"[ERROR] {e}")
        sys.exit(1)

    if not config.has_credentials:
        logger.error("[ERROR] GITLAB_TOKENS or GITHUB_TOKENS is not set")
        sys.exit(1)

    logger.info(f"[CONFIG] Mirror root: {config.repos_dir}")
    logger.info(
        f"[CONFIG] {len(config.github_tokens)} GitHub and {len(config.gitlab_tokens)} GitLab credential(s)"
    )

    interval = RUN_ONCE if args.once else config.repeat_interval
    orchestrator = RepoMirrorOrchestrator(config)

    try:
        run_forever(orchestrator, interval)
    except KeyboardInterrupt:
        logger.warning("[SCHEDULE] Interrupted, stopping")


if __name__ == "__main__":
    main()
