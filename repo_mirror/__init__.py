"""
repo-mirror - Repository mirror tool

Discovers every GitHub and GitLab repository an account and its
organizations/groups can see, and keeps a local git mirror of each.

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

__version__ = "1.0.0"
__author__ = "Derek"
__license__ = "Apache-2.0"
__description__ = "Mirror every repository a GitHub or GitLab account can see to local storage"

from .base import DiscoveryResult, Namespace, Repository, RepositoryManager, paginate
from .config import BackupConfig
from .errors import (
    AuthError,
    ConfigurationError,
    DiscoveryError,
    PartialDiscoveryWarning,
    SkippedRepositoryWarning,
    RepoMirrorError,
    SyncError,
)
from .github_manager import GitHubManager
from .gitlab_manager import GitLabManager
from .local_mirror import LocalMirror, normalize_repo_key
from .main import RepoMirrorOrchestrator, main
from .report import BackupReport, CredentialReport

__all__ = [
    "Repository",
    "Namespace",
    "DiscoveryResult",
    "RepositoryManager",
    "paginate",
    "BackupConfig",
    "RepoMirrorError",
    "ConfigurationError",
    "AuthError",
    "DiscoveryError",
    "PartialDiscoveryWarning",
    "SkippedRepositoryWarning",
    "SyncError",
    "GitHubManager",
    "GitLabManager",
    "LocalMirror",
    "normalize_repo_key",
    "RepoMirrorOrchestrator",
    "BackupReport",
    "CredentialReport",
    "main",
]
