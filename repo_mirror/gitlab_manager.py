"""
GitLab repository manager

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

GITLAB_URL = "https://gitlab.com"


class GitLabManager(RepositoryManager):
    platform = "gitlab"

    def __init__(
        self,
        token: str,
        url: str = GITLAB_URL,
        session: Optional[requests.Session] = None,
        timeout: int = REQUEST_TIMEOUT,
    ):
        self.url = url.rstrip("/")
        super().__init__(
            token, f"{self.url}/api/v4", session=session, timeout=timeout
        )

    @property
    def clone_credential(self) -> str:
        # Changed from a bare token: GitLab needs a user name in front of it for HTTPS git
        return f"oauth2:{self.token}"

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def get_identity(self) -> Namespace:
        user = self.get_json("/user")
        if not isinstance(user, dict) or user.get("id") is None:
            raise DiscoveryError("GitLab API returned a user without an id")
        return Namespace(id=user["id"], name=user.get("username") or str(user["id"]))

    def get_user_repositories(self, identity: Namespace) -> List[Repository]:
        return self.list_pages(
            f"/users/{identity.id}/projects",
            {"membership": "true"},
            lambda item: self._to_repository(item, identity.name),
        )

    def get_namespaces(self) -> List[Namespace]:
        return self.list_pages(
            "/groups",
            {"membership": "true"},
            self._to_namespace,
        )

    def get_namespace_repositories(self, namespace: Namespace) -> List[Repository]:
        return self.list_pages(
            f"/groups/{namespace.id}/projects",
            extract=lambda item: self._to_repository(item, namespace.name),
        )

    def _to_namespace(self, group: dict) -> Optional[Namespace]:
        if group.get("id") is None:
            return None
        name = group.get("full_path") or group.get("name") or str(group["id"])
        return Namespace(id=group["id"], name=name)

    def _to_repository(self, item: dict, owner: str) -> Optional[Repository]:
        clone_url = item.get("http_url_to_repo")
        if not clone_url:
            name = item.get("path_with_namespace") or item.get("name") or "<unnamed>"
            self.skip_repository(owner, name, "no http_url_to_repo")
            return None
        return Repository(clone_url=clone_url, owner=owner, platform=self.platform)
