"""
Tests for failure notifications

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

from unittest.mock import MagicMock

import requests
from helpers import FakeResponse

from repo_mirror.notifier import NullNotifier, TelegramNotifier, create_notifier


class TestTelegramNotifier:
    """Tests for TelegramNotifier"""

    def test_sends_prefixed_message(self):
        session = MagicMock()
        session.post.return_value = FakeResponse(200)
        notifier = TelegramNotifier("bot-token", "42", session=session)

        assert notifier.notify("mirror failed") is True

        url = session.post.call_args.args[0]
        data = session.post.call_args.kwargs["data"]
        assert url == "https://api.telegram.org/botbot-token/sendMessage"
        assert data == {"chat_id": "42", "text": "repo-mirror: mirror failed"}

    def test_non_200_is_not_fatal(self):
        session = MagicMock()
        session.post.return_value = FakeResponse(400)
        notifier = TelegramNotifier("bot-token", "42", session=session)

        assert notifier.notify("mirror failed") is False

    def test_network_error_is_not_fatal(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("down")
        notifier = TelegramNotifier("bot-token", "42", session=session)

        assert notifier.notify("mirror failed") is False


class TestCreateNotifier:
    """Tests for create_notifier"""

    def test_missing_settings_disable_notifications(self):
        assert isinstance(create_notifier(None, "42"), NullNotifier)
        assert isinstance(create_notifier("bot", None), NullNotifier)

    def test_telegram_notifier(self):
        notifier = create_notifier("bot", "42")
        assert isinstance(notifier, TelegramNotifier)
        assert notifier.chat_id == "42"
