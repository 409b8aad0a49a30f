"""
Error types raised while discovering and mirroring repositories

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

from typing import Optional


class RepoMirrorError(Exception):
    """Base class for all repo-mirror errors"""


class ConfigurationError(RepoMirrorError):
    """Invalid or missing configuration"""


class DiscoveryError(RepoMirrorError):
    """A listing call against a provider API failed"""

    def __init__(
        self, message: str, url: Optional[str] = None, status: Optional[int] = None
    ):
        super().__init__(message)
        self.url = url
        self.status = status


class AuthError(DiscoveryError):
    """The provider rejected the credential"""


class PartialDiscoveryWarning(RepoMirrorError):
    """
    A single namespace could not be listed.

    Never raised to callers; stored on the discovery result so the
    namespace's absence can be reported after the fact.
    """

    def __init__(self, namespace: str, reason: str):
        super().__init__(f"Could not list repositories for {namespace}: {reason}")
        self.namespace = namespace
        self.reason = reason


class SkippedRepositoryWarning(PartialDiscoveryWarning):
    """A listed repository had no usable clone URL and was left out"""

    def __init__(self, namespace: str, repository: str, reason: str):
        RepoMirrorError.__init__(
            self, f"Skipped repository {repository} in {namespace}: {reason}"
        )
        self.namespace = namespace
        self.repository = repository
        self.reason = reason


class SyncError(RepoMirrorError):
    """The mirror transport exited non-zero for one repository"""

    def __init__(
        self,
        url: str,
        output: str,
        path: Optional[str] = None,
        returncode: Optional[int] = None,
    ):
        message = f"Failed to mirror repository {url}"
        if returncode is not None:
            message += f" (exit status {returncode})"
        if output:
            message += f"\nGit output: {output}"
        super().__init__(message)
        self.url = url
        self.output = output
        self.path = path
        self.returncode = returncode
