"""
Discovery of provider credentials from the environment and standard locations

Copyright 2025 HyperSec

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional
from urllib.parse import urlparse

import yaml

logger = logging.getLogger(__name__)


def split_tokens(value: Optional[str]) -> List[str]:
    """Split a comma-separated credential list, dropping blank entries"""
    if not value:
        return []
    return [t.strip() for t in value.split(",") if t.strip()]


def get_github_token(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Discover a single GitHub token.

    Priority:
    1. GITHUB_TOKEN environment variable
    2. GH_TOKEN environment variable
    3. gh CLI auth token (via `gh auth token` command)

    Returns:
        GitHub token or None if not found
    """
    environ = os.environ if environ is None else environ

    token = environ.get("GITHUB_TOKEN")
    if token:
        logger.debug("[TOKEN] GitHub token found in GITHUB_TOKEN env var")
        return token

    token = environ.get("GH_TOKEN")
    if token:
        logger.debug("[TOKEN] GitHub token found in GH_TOKEN env var")
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0 and result.stdout.strip():
            logger.info("[TOKEN] GitHub token discovered from gh CLI")
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError):
        pass

    return None


def glab_config_paths(environ: Optional[Mapping[str, str]] = None) -> List[Path]:
    environ = os.environ if environ is None else environ
    paths = [Path.home() / ".config" / "glab-cli" / "config.yml"]
    xdg = environ.get("XDG_CONFIG_HOME")
    if xdg:
        paths.insert(0, Path(xdg) / "glab-cli" / "config.yml")
    return paths


def get_gitlab_token(
    gitlab_url: str = "https://gitlab.com",
    environ: Optional[Mapping[str, str]] = None,
    config_paths: Optional[List[Path]] = None,
) -> Optional[str]:
    """
    Discover a single GitLab token.

    Priority:
    1. GITLAB_TOKEN environment variable
    2. glab CLI config (hosts.<hostname>.token)

    Args:
        gitlab_url: GitLab instance URL to look up token for
    """
    environ = os.environ if environ is None else environ

    token = environ.get("GITLAB_TOKEN")
    if token:
        logger.debug("[TOKEN] GitLab token found in GITLAB_TOKEN env var")
        return token

    hostname = urlparse(gitlab_url).netloc or "gitlab.com"

    for config_path in config_paths or glab_config_paths(environ):
        if not config_path.exists():
            continue
        try:
            with open(config_path) as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.debug(f"[TOKEN] Failed to read glab config {config_path}: {e}")
            continue

        hosts = config.get("hosts") if isinstance(config, dict) else None
        host_config = (hosts or {}).get(hostname) or {}
        token = host_config.get("token") if isinstance(host_config, dict) else None
        if token:
            logger.info(f"[TOKEN] GitLab token discovered from {config_path}")
            return token

    return None


def get_github_tokens(
    environ: Optional[Mapping[str, str]] = None, discover: bool = True
) -> List[str]:
    """GITHUB_TOKENS list, or a single discovered token when the list is unset"""
    environ = os.environ if environ is None else environ

    if "GITHUB_TOKENS" in environ:
        return split_tokens(environ["GITHUB_TOKENS"])

    if discover:
        token = get_github_token(environ)
        if token:
            return [token]
    return []


def get_gitlab_tokens(
    gitlab_url: str = "https://gitlab.com",
    environ: Optional[Mapping[str, str]] = None,
    discover: bool = True,
) -> List[str]:
    """GITLAB_TOKENS list, or a single discovered token when the list is unset"""
    environ = os.environ if environ is None else environ

    if "GITLAB_TOKENS" in environ:
        return split_tokens(environ["GITLAB_TOKENS"])

    if discover:
        token = get_gitlab_token(gitlab_url, environ)
        if token:
            return [token]
    return []
