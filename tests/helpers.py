"""
Fake HTTP sessions, git transports and API payloads for tests

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

from pathlib import Path

from repo_mirror.local_mirror import TransportResult


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.payload = payload
        self.text = text

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """
    Stand-in for requests.Session.

    routes maps a full URL to one of:
    - a list of pages (each a list of items), served by the page param
    - an int status code
    - an exception instance, raised from get()
    - any other JSON-able value, returned as-is
    """

    def __init__(self, routes):
        self.routes = routes
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        params = dict(params or {})
        self.calls.append((url, params))
        route = self.routes.get(url)

        if route is None:
            return FakeResponse(404, text="not found")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, int):
            return FakeResponse(route, text="error")
        if isinstance(route, list):
            page = params.get("page", 1)
            pages = route
            return FakeResponse(200, pages[page - 1] if page <= len(pages) else [])
        return FakeResponse(200, route)

    def calls_to(self, url):
        return [c for c in self.calls if c[0] == url]


class FakeTransport:
    """Records git invocations; clone creates the target directory"""

    def __init__(self, fail_urls=(), output="", returncode=1):
        self.fail_urls = set(fail_urls)
        self.output = output
        self.returncode = returncode
        self.calls = []

    def clone(self, url, path):
        self.calls.append(("clone", url, Path(path)))
        if any(f in url for f in self.fail_urls):
            return TransportResult(self.returncode, self.output)
        Path(path).mkdir(parents=True)
        return TransportResult(0, "Cloning into bare repository...")

    def fetch_all(self, path):
        self.calls.append(("fetch", None, Path(path)))
        if any(f in str(path) for f in self.fail_urls):
            return TransportResult(self.returncode, self.output)
        return TransportResult(0, "Fetching origin")


def github_repos(owner, count, start=0):
    return [
        {
            "full_name": f"{owner}/repo{i}",
            "clone_url": f"https://github.com/{owner}/repo{i}.git",
            "ssh_url": f"git@github.com:{owner}/repo{i}.git",
            "private": True,
        }
        for i in range(start, start + count)
    ]


def gitlab_projects(namespace, count):
    return [
        {
            "id": 1000 + i,
            "path_with_namespace": f"{namespace}/project{i}",
            "http_url_to_repo": f"https://gitlab.com/{namespace}/project{i}.git",
            "ssh_url_to_repo": f"git@gitlab.com:{namespace}/project{i}.git",
            "visibility": "private",
            "archived": False,
        }
        for i in range(count)
    ]
