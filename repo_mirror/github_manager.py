"""
GitHub repository manager

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

from typing import Dict, List, Optional

import requests

from .base import REQUEST_TIMEOUT, Namespace, Repository, RepositoryManager
from .errors import DiscoveryError

GITHUB_API_URL = "https://api.github.com"


class GitHubManager(RepositoryManager):
    platform = "github"

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_API_URL,
        session: Optional[requests.Session] = None,
        timeout: int = REQUEST_TIMEOUT,
    ):
        super().__init__(token, api_url, session=session, timeout=timeout)

    def auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github.v3+json",
        }

    def get_identity(self) -> Namespace:
        user = self.get_json("/user")
        login = user.get("login") if isinstance(user, dict) else None
        if not login:
            raise DiscoveryError("GitHub API returned a user without a login")
        return Namespace(id=login, name=login)

    def get_user_repositories(self, identity: Namespace) -> List[Repository]:
        return self.list_pages(
            f"/users/{identity.id}/repos",
            {"type": "all"},
            lambda item: self._to_repository(item, identity.name),
        )

    def get_namespaces(self) -> List[Namespace]:
        return self.list_pages(
            "/user/orgs",
            extract=lambda org: (
                Namespace(id=org["login"], name=org["login"])
                if org.get("login")
                else None
            ),
        )

    def get_namespace_repositories(self, namespace: Namespace) -> List[Repository]:
        return self.list_pages(
            f"/orgs/{namespace.id}/repos",
            {"type": "all"},
            lambda item: self._to_repository(item, namespace.name),
        )

    def _to_repository(self, item: dict, owner: str) -> Optional[Repository]:
        # HTTPS only, ssh_url is ignored
        clone_url = item.get("clone_url")
        if not clone_url:
            name = item.get("full_name") or item.get("name") or "<unnamed>"
            self.skip_repository(owner, name, "no clone_url")
            return None
        return Repository(clone_url=clone_url, owner=owner, platform=self.platform)
