"""
Base classes for repository discovery

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
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

import requests

from .errors import (
    AuthError,
    DiscoveryError,
    PartialDiscoveryWarning,
    SkippedRepositoryWarning,
)

PAGE_SIZE = 100
REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class Repository:
    clone_url: str
    owner: str
    platform: str


@dataclass(frozen=True)
class Namespace:
    """A user or organization/group that owns repositories"""

    id: Union[int, str]
    name: str


@dataclass
class DiscoveryResult:
    platform: str
    account: str
    repositories: List[Repository] = field(default_factory=list)
    warnings: List[PartialDiscoveryWarning] = field(default_factory=list)

    @property
    def clone_urls(self) -> List[str]:
        return [r.clone_url for r in self.repositories]


def paginate(
    fetch_page: Callable[[int], List[Any]],
    extract: Optional[Callable[[Any], Any]] = None,
    page_size: int = PAGE_SIZE,
) -> List[Any]:
    """
    Collect every item of a page-numbered listing.

    Pages are requested from 1 upwards. The loop stops on an empty page or
    on a page shorter than page_size, so a full last page costs one extra
    (empty) request.

    Args:
        fetch_page: Returns the raw items of the given 1-based page
        extract: Optional mapping applied to every item; None results are dropped
        page_size: Number of items a full page holds

    Returns:
        Items of all pages in the order they were returned
    """
    items = []
    page = 1

    while True:
        batch = fetch_page(page)
        if not batch:
            break

        for item in batch:
            value = extract(item) if extract else item
            if value is not None:
                items.append(value)

        if len(batch) < page_size:
            break

        page += 1

    return items


def mask_secret(secret: str) -> str:
    """Shorten a credential to something safe to print"""
    if not secret:
        return ""
    if len(secret) <= 12:
        return "****"
    return f"{secret[:4]}****{secret[-4:]}"


class RepositoryManager(ABC):
    """
    Walks one provider account: the user's own repositories, then every
    organization/group the user belongs to.
    """

    platform = ""

    def __init__(
        self,
        token: str,
        api_url: str,
        session: Optional[requests.Session] = None,
        timeout: int = REQUEST_TIMEOUT,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(self.auth_headers())
        self.logger = logging.getLogger(self.__class__.__name__)
        self.skipped: List[SkippedRepositoryWarning] = []

    @property
    def clone_credential(self) -> str:
        """Credential to embed in HTTPS clone URLs"""
        return self.token

    @abstractmethod
    def auth_headers(self) -> Dict[str, str]:
        pass

    @abstractmethod
    def get_identity(self) -> Namespace:
        pass

    @abstractmethod
    def get_user_repositories(self, identity: Namespace) -> List[Repository]:
        pass

    @abstractmethod
    def get_namespaces(self) -> List[Namespace]:
        pass

    @abstractmethod
    def get_namespace_repositories(self, namespace: Namespace) -> List[Repository]:
        pass

    def discover(self) -> DiscoveryResult:
        """
        Enumerate every repository visible to the credential.

        Identity lookup, the personal listing and the namespace listing are
        required; any failure there raises. A failure listing one namespace
        is recorded as a warning and the namespace is skipped. Repositories
        without a clone URL are left out and reported as warnings too.
        """
        identity = self.get_identity()
        self.logger.debug(
            f"[DISCOVER] {self.platform} authentication successful for {identity.name}"
        )
        result = DiscoveryResult(platform=self.platform, account=identity.name)
        self.skipped = []

        personal = self.get_user_repositories(identity)
        self.logger.info(
            f"[DISCOVER] Found {len(personal)} repositories for user {identity.name}"
        )
        result.repositories.extend(personal)

        namespaces = self.get_namespaces()
        self.logger.info(
            f"[DISCOVER] {identity.name} belongs to {len(namespaces)} namespaces"
        )

        for namespace in namespaces:
            try:
                repos = self.get_namespace_repositories(namespace)
            except DiscoveryError as e:
                warning = PartialDiscoveryWarning(namespace.name, str(e))
                self.logger.warning(f"[WARN] {warning}")
                result.warnings.append(warning)
                continue

            self.logger.info(
                f"[DISCOVER] Found {len(repos)} repositories in {namespace.name}"
            )
            result.repositories.extend(repos)

        result.warnings.extend(self.skipped)
        return result

    def skip_repository(self, owner: str, name: str, reason: str) -> None:
        """Record a listed repository that cannot be mirrored"""
        warning = SkippedRepositoryWarning(owner, name, reason)
        self.logger.warning(f"[SKIP] {warning}")
        self.skipped.append(warning)

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET an API path and decode the JSON body"""
        url = path if path.startswith("http") else f"{self.api_url}{path}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise DiscoveryError(f"Request to {url} failed: {e}", url=url) from e

        if response.status_code in (401, 403):
            raise AuthError(
                f"{self.platform} API rejected the credential for {url} "
                f"(status {response.status_code})",
                url=url,
                status=response.status_code,
            )

        if response.status_code != 200:
            self.logger.debug(f"Response: {response.text[:500]}")
            raise DiscoveryError(
                f"{self.platform} API returned status {response.status_code} for {url}",
                url=url,
                status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DiscoveryError(
                f"{self.platform} API returned invalid JSON for {url}: {e}", url=url
            ) from e

    def list_pages(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        extract: Optional[Callable[[Any], Any]] = None,
    ) -> List[Any]:
        """Page through a listing endpoint PAGE_SIZE items at a time"""

        def fetch_page(page: int) -> List[Any]:
            page_params = dict(params or {})
            page_params.update({"per_page": PAGE_SIZE, "page": page})
            data = self.get_json(path, page_params)
            if not isinstance(data, list):
                raise DiscoveryError(
                    f"{self.platform} API returned a non-list page for {path}"
                )
            if not all(isinstance(item, dict) for item in data):
                raise DiscoveryError(
                    f"{self.platform} API returned a malformed item on page {page} of {path}"
                )
            return data

        return paginate(fetch_page, extract)
