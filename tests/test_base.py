"""
Tests for base module

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

import dataclasses

import pytest

from repo_mirror.base import (
    PAGE_SIZE,
    DiscoveryResult,
    Namespace,
    Repository,
    mask_secret,
    paginate,
)


class TestRepository:
    """Tests for Repository dataclass"""

    def test_repository_creation(self):
        """Test basic repository creation"""
        repo = Repository(
            clone_url="https://github.com/test/test-repo.git",
            owner="test-org",
            platform="github",
        )

        assert repo.clone_url == "https://github.com/test/test-repo.git"
        assert repo.owner == "test-org"
        assert repo.platform == "github"

    def test_repository_equality(self):
        """Test that two repositories with same values are equal"""
        repo1 = Repository("https://github.com/o/r.git", "o", "github")
        repo2 = Repository("https://github.com/o/r.git", "o", "github")

        assert repo1 == repo2

    def test_repository_is_immutable(self):
        """Test repositories cannot be modified after discovery"""
        repo = Repository("https://github.com/o/r.git", "o", "github")

        with pytest.raises(dataclasses.FrozenInstanceError):
            repo.clone_url = "https://github.com/o/other.git"


class TestDiscoveryResult:
    """Tests for DiscoveryResult"""

    def test_clone_urls_keep_order(self):
        """Test clone_urls lists repositories in discovery order"""
        result = DiscoveryResult(platform="github", account="me")
        result.repositories.extend(
            [
                Repository("https://github.com/me/b.git", "me", "github"),
                Repository("https://github.com/org/a.git", "org", "github"),
            ]
        )

        assert result.clone_urls == [
            "https://github.com/me/b.git",
            "https://github.com/org/a.git",
        ]
        assert result.warnings == []

    def test_namespace(self):
        """Test namespace holds provider id and display name"""
        ns = Namespace(id=42, name="group/sub")
        assert ns.id == 42
        assert ns.name == "group/sub"


class PageSource:
    """Fake listing source serving fixed page sizes"""

    def __init__(self, *sizes):
        self.sizes = sizes
        self.requested = []

    def __call__(self, page):
        self.requested.append(page)
        if page > len(self.sizes):
            return []
        return [f"item-{page}-{i}" for i in range(self.sizes[page - 1])]


class TestPaginate:
    """Tests for the shared paginated lister"""

    def test_page_size_is_100(self):
        assert PAGE_SIZE == 100

    def test_stops_on_short_page(self):
        """Test 100, 100, 37 yields 237 items in 3 requests"""
        source = PageSource(100, 100, 37)

        items = paginate(source)

        assert len(items) == 237
        assert source.requested == [1, 2, 3]

    def test_full_page_followed_by_empty_page(self):
        """Test 100, 0 yields 100 items in 2 requests"""
        source = PageSource(100, 0)

        items = paginate(source)

        assert len(items) == 100
        assert source.requested == [1, 2]

    def test_empty_listing(self):
        """Test an empty first page ends after one request"""
        source = PageSource(0)

        assert paginate(source) == []
        assert source.requested == [1]

    def test_single_short_page(self):
        """Test a single partial page is not followed by another request"""
        source = PageSource(5, 100)

        assert len(paginate(source)) == 5
        assert source.requested == [1]

    def test_items_keep_order(self):
        """Test items are returned in page order"""
        items = paginate(PageSource(100, 2))

        assert items[0] == "item-1-0"
        assert items[-1] == "item-2-1"

    def test_extract_maps_and_drops_none(self):
        """Test extract is applied per item and None results are dropped"""
        pages = [[{"url": "a"}, {}, {"url": "b"}]]

        items = paginate(lambda page: pages[page - 1], lambda item: item.get("url"))

        assert items == ["a", "b"]

    def test_dropped_items_do_not_end_pagination(self):
        """Test page length, not extracted length, decides termination"""
        source = PageSource(100, 3)

        items = paginate(source, lambda item: None)

        assert items == []
        assert source.requested == [1, 2]

    def test_custom_page_size(self):
        """Test termination follows the given page size"""
        source = PageSource(10, 10, 4)

        assert len(paginate(source, page_size=10)) == 24
        assert source.requested == [1, 2, 3]


class TestMaskSecret:
    """Tests for mask_secret"""

    def test_long_secret(self):
        assert mask_secret("ghp_abcdefghijklmnop1234") == "ghp_****1234"

    def test_short_secret(self):
        assert mask_secret("short") == "****"

    def test_empty_secret(self):
        assert mask_secret("") == ""
