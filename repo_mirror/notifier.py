"""
Failure notifications

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
from typing import Optional

import requests

TELEGRAM_API_URL = "https://api.telegram.org"
MESSAGE_PREFIX = "repo-mirror: "

logger = logging.getLogger(__name__)


class NullNotifier:
    """Drops every message"""

    def notify(self, message: str) -> bool:
        return False


class TelegramNotifier:
    """
    Sends failure messages to a Telegram chat through the Bot API.

    Delivery problems are logged and never raised.
    """

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        api_url: str = TELEGRAM_API_URL,
        session: Optional[requests.Session] = None,
        timeout: int = 10,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def notify(self, message: str) -> bool:
        url = f"{self.api_url}/bot{self.bot_token}/sendMessage"
        data = {"chat_id": self.chat_id, "text": MESSAGE_PREFIX + message}

        try:
            response = self.session.post(url, data=data, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"[NOTIFY] Error sending telegram message: {type(e).__name__}")
            return False

        if response.status_code != 200:
            logger.warning(
                f"[NOTIFY] Error sending telegram message: status {response.status_code}"
            )
            return False

        return True


def create_notifier(bot_token: Optional[str], chat_id: Optional[str]):
    if not bot_token or not chat_id:
        logger.info(
            "[NOTIFY] TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID is not set, notifications disabled"
        )
        return NullNotifier()
    return TelegramNotifier(bot_token, chat_id)
