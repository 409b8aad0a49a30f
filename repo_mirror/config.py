"""
Runtime configuration

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

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from .errors import ConfigurationError
from .github_manager import GITHUB_API_URL
from .gitlab_manager import GITLAB_URL
from .local_mirror import DEFAULT_REPOS_DIR
from .token_discovery import get_github_tokens, get_gitlab_tokens

RUN_ONCE = -1


def _parse_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


@dataclass
class BackupConfig:
    """Everything a backup pass needs, read once at startup"""

    repos_dir: str = DEFAULT_REPOS_DIR
    github_tokens: List[str] = field(default_factory=list)
    gitlab_tokens: List[str] = field(default_factory=list)
    github_api_url: str = GITHUB_API_URL
    gitlab_url: str = GITLAB_URL
    repeat_interval: int = RUN_ONCE
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    workers: int = 1

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BackupConfig":
        environ = os.environ if environ is None else environ

        discover = environ.get("TOKEN_DISCOVERY", "true").lower() == "true"
        gitlab_url = environ.get("GITLAB_URL") or GITLAB_URL
        workers = _parse_int(environ, "PARALLEL_WORKERS", 1)
        if workers < 1:
            raise ConfigurationError(f"PARALLEL_WORKERS must be at least 1, got {workers}")

        return cls(
            repos_dir=environ.get("REPOS_DIR") or DEFAULT_REPOS_DIR,
            github_tokens=get_github_tokens(environ, discover=discover),
            gitlab_tokens=get_gitlab_tokens(gitlab_url, environ, discover=discover),
            github_api_url=environ.get("GITHUB_API_URL") or GITHUB_API_URL,
            gitlab_url=gitlab_url,
            repeat_interval=_parse_int(environ, "REPEAT_INTERVAL", RUN_ONCE),
            telegram_bot_token=environ.get("TELEGRAM_BOT_TOKEN") or None,
            telegram_chat_id=environ.get("TELEGRAM_CHAT_ID") or None,
            workers=workers,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.github_tokens or self.gitlab_tokens)

    @property
    def run_once(self) -> bool:
        return self.repeat_interval <= 0
