"""
Results of a backup pass

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

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import PartialDiscoveryWarning, RepoMirrorError, SyncError


@dataclass
class CredentialReport:
    """Outcome of discovering and mirroring one credential on one platform"""

    platform: str
    account: str
    discovered: List[str] = field(default_factory=list)
    synced: List[str] = field(default_factory=list)
    warnings: List[PartialDiscoveryWarning] = field(default_factory=list)
    failures: List[SyncError] = field(default_factory=list)
    error: Optional[RepoMirrorError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failures and not self.warnings


@dataclass
class BackupReport:
    credentials: List[CredentialReport] = field(default_factory=list)

    @property
    def discovered(self) -> int:
        return sum(len(c.discovered) for c in self.credentials)

    @property
    def synced(self) -> int:
        return sum(len(c.synced) for c in self.credentials)

    @property
    def failed(self) -> int:
        return sum(len(c.failures) for c in self.credentials)

    @property
    def warnings(self) -> List[PartialDiscoveryWarning]:
        return [w for c in self.credentials for w in c.warnings]

    @property
    def errors(self) -> List[RepoMirrorError]:
        return [c.error for c in self.credentials if c.error is not None]

    @property
    def has_failures(self) -> bool:
        return any(not c.ok for c in self.credentials)
