from __future__ import annotations

from typing import Dict, List, Optional

import aiohttp
import pytest

from nct_checker import browser as nct_browser
from nct_checker.config import BrowserConfig, Settings


class FakeLocator:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self.page = page
        self.selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    def _act(self, action: str, *args) -> None:
        self.page.calls.append((action, self.selector) + args)
        error = self.page.fail_on.get(self.selector)
        if error is not None:
            raise error

    async def fill(self, value: str) -> None:
        self._act("fill", value)

    async def click(self) -> None:
        self._act("click")

    async def check(self) -> None:
        self._act("check")

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        self._act("wait_for", state)
        if self.selector == nct_browser.CONSENT_BUTTON and not self.page.consent_visible:
            raise TimeoutError("Timeout waiting for consent button")

    async def count(self) -> int:
        self._act("count")
        return len(self.page.dates.get(self.page.selected_center, []))

    async def get_attribute(self, name: str) -> Optional[str]:
        self._act("get_attribute", name)
        return self.page.dates[self.page.selected_center][0]


class FakePage:
    """Tiny stand-in for playwright Page covering what the checker touches."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.fail_on: Dict[str, BaseException] = {}
        self.consent_visible = True
        self.dates: Dict[str, List[Optional[str]]] = {}
        self.failing_centers: Dict[str, BaseException] = {}
        self.selected_center: Optional[str] = None

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def goto(self, url: str) -> None:
        self.calls.append(("goto", url))

    async def wait_for_load_state(self, state: str = "load") -> None:
        self.calls.append(("wait_for_load_state", state))

    async def wait_for_timeout(self, timeout: float) -> None:
        self.calls.append(("wait_for_timeout", timeout))

    async def select_option(self, selector: str, label: str) -> None:
        self.calls.append(("select_option", selector, label))
        if label in self.failing_centers:
            raise self.failing_centers[label]
        self.selected_center = label

    def actions(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]


class FakeResponse:
    def __init__(self, status: int, reason: str = "OK") -> None:
        self.status = status
        self.reason = reason

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None


class FakeSession:
    """Records webhook posts instead of sending them."""

    def __init__(self, status: int = 200, error: Optional[BaseException] = None) -> None:
        self.status = status
        self.error = error
        self.posts: List[tuple] = []
        self.closed = False

    def post(self, url: str, json: dict) -> FakeResponse:
        self.posts.append((url, json))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status, "OK" if self.status < 400 else "Bad Request")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def page() -> FakePage:
    return FakePage()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        car_registration="191-D-12345",
        booking_id="NCT0099",
        slack_webhook_url="https://hooks.slack.com/services/T000/B000/XXXX",
        automated=True,
        browser=BrowserConfig(settle_delay_ms=0, reveal_delay_ms=0, reset_delay_ms=0),
    )


@pytest.fixture
def connection_error() -> aiohttp.ClientError:
    return aiohttp.ClientConnectionError("connection refused")


@pytest.fixture
def make_session():
    return FakeSession
