"""
Local filesystem mirror functionality

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
import re
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from .base import mask_secret
from .errors import SyncError

DEFAULT_REPOS_DIR = "./repos"

_TRANSPORT_PREFIXES = ("https://", "git@")
_DISALLOWED_CHARS = re.compile(r"[^a-zA-Z0-9\-]")


def normalize_repo_key(url: str) -> str:
    """
    Turn a clone URL into a directory name.

    https://github.com/Org/Repo.git -> github_com_org_repo

    Every character outside [a-zA-Z0-9-] becomes its own underscore, so
    distinct URLs can still map to the same key.
    """
    key = url
    for prefix in _TRANSPORT_PREFIXES:
        if key.startswith(prefix):
            key = key[len(prefix) :]

    if key.endswith(".git"):
        key = key[:-4]

    return _DISALLOWED_CHARS.sub("_", key).lower()


def authenticated_url(url: str, credential: str) -> str:
    """Embed credential as the user part of an HTTPS URL; other schemes are left alone"""
    if credential and url.startswith("https://"):
        return f"https://{credential}@{url[len('https://'):]}"
    return url


def redact(text: str, credential: str) -> str:
    """Replace every occurrence of credential (and its secret half) in text"""
    if not text or not credential:
        return text
    secrets = [credential]
    if ":" in credential:
        secrets.append(credential.split(":", 1)[1])
    for secret in secrets:
        if secret:
            text = text.replace(secret, mask_secret(secret))
    return text


@dataclass
class TransportResult:
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitTransport:
    """Runs git and captures its combined stdout/stderr"""

    def __init__(self, git: str = "git"):
        self.git = git

    def clone(self, url: str, path: Path) -> TransportResult:
        return self._run([self.git, "clone", "--mirror", url, str(path)])

    def fetch_all(self, path: Path) -> TransportResult:
        return self._run([self.git, "fetch", "--all"], cwd=path)

    def _run(self, cmd: List[str], cwd: Optional[Path] = None) -> TransportResult:
        env = dict(os.environ)
        env["GIT_TERMINAL_PROMPT"] = "0"

        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            cwd=str(cwd) if cwd else None,
            env=env,
        )
        return TransportResult(returncode=result.returncode, output=result.stdout or "")


class LocalMirror:
    def __init__(
        self,
        root: Union[str, Path] = DEFAULT_REPOS_DIR,
        transport: Optional[GitTransport] = None,
    ):
        """
        Initialize local mirror storage
        Args:
            root: Directory holding one mirror per repository
            transport: Git runner (default: GitTransport())
        """
        self.root = Path(root)
        self.transport = transport or GitTransport()
        self.logger = logging.getLogger(self.__class__.__name__)

        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def mirror_path(self, remote_url: str) -> Path:
        return self.root / normalize_repo_key(remote_url)

    def sync(self, remote_url: str, credential: str = "") -> None:
        """
        Create or update the local mirror of remote_url.

        A missing mirror directory is cloned from the (authenticated) URL.
        An existing one is updated with a fetch of all remotes, relying on
        the remote configuration stored by the initial clone.

        Raises:
            SyncError: git exited non-zero or could not be started
        """
        key = normalize_repo_key(remote_url)
        repo_path = self.root / key

        # Create-vs-update must not interleave for one key
        with self._lock_for(key):
            try:
                if not repo_path.exists():
                    self.root.mkdir(parents=True, exist_ok=True)
                    self.logger.info(
                        f"[CLONE] Cloning repository {remote_url} to {repo_path}"
                    )
                    result = self.transport.clone(
                        authenticated_url(remote_url, credential), repo_path
                    )
                else:
                    self.logger.info(
                        f"[FETCH] Fetching updates from repository {remote_url} to {repo_path}"
                    )
                    result = self.transport.fetch_all(repo_path)
            except OSError as e:
                raise SyncError(
                    remote_url, redact(str(e), credential), path=str(repo_path)
                ) from e

        if not result.ok:
            output = redact(result.output.strip(), credential)
            self.logger.error(
                f"[ERROR] Mirror failed for {remote_url}: {output[:500]}"
            )
            raise SyncError(
                remote_url, output, path=str(repo_path), returncode=result.returncode
            )

        self.logger.info(f"[SYNC] Successfully updated {remote_url} in {key}")

    def _lock_for(self, key: str) -> threading.Lock:
        with self._locks_guard:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]
