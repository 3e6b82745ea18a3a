"""
Playwright-based browser automation for the NCT booking site.

Browser-модуль на Playwright:
- проход по фиксированной цепочке шагов формы (ncts.ie)
- выбор центра в выпадающем списке и чтение первой доступной даты

Порядок шагов задаёт сам сайт: каждая следующая кнопка появляется только
после предыдущего шага, поэтому цепочка не переставляется и не пропускается.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Sequence

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from .config import BrowserConfig, Settings
from .models import StepOutcome, StepStatus

logger = logging.getLogger(__name__)


CONSENT_BUTTON = 'button:has-text("Accept"), button:has-text("accept")'
REGISTRATION_INPUT = "#rid"
SEARCH_VEHICLE_BUTTON = "#btnSearchVehicle"
AGREE_CHECKBOX = "#agreeChk"
PRIVACY_CHECKBOX = "#chkPrivacyRead"
CONFIRM_VEHICLE_BUTTON = "#confirmVehicleYes"
MANAGE_BOOKING_BUTTON = "#confirmManageBookingYes"
BOOKING_ID_INPUT = "#RescheduleManagedBookingId"
RESCHEDULE_BUTTON = ".btn.btn-nct-yellow.btn-block"
CONFIRM_BOOKING_BUTTON = "#confirmBookingYes"
SHOW_MORE_CENTERS = "#showMoreStations"
CENTERS_DROPDOWN = "#nctCentresDropdown"
DATE_OPTIONS = 'input[name="SelectedBookingDay"]'
DATE_ATTRIBUTE = "data-value"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)


StepAction = Callable[[Page, Settings], Awaitable[None]]


class FormStepError(RuntimeError):
    """Raised when a required step of the booking form flow fails."""

    def __init__(self, step: str, cause: BaseException) -> None:
        super().__init__(f"Form step '{step}' failed: {cause}")
        self.step = step
        self.cause = cause


@dataclass(frozen=True)
class FormStep:
    name: str
    action: StepAction
    optional: bool = False


# region steps
async def open_start_page(page: Page, settings: Settings) -> None:
    await page.goto(settings.browser.start_url)
    await page.wait_for_load_state("networkidle")


async def accept_cookies(page: Page, settings: Settings) -> None:
    button = page.locator(CONSENT_BUTTON).first
    await button.wait_for(state="visible", timeout=settings.browser.consent_timeout_ms)
    await button.click()
    await page.wait_for_timeout(settings.browser.consent_delay_ms)


async def search_vehicle(page: Page, settings: Settings) -> None:
    await page.locator(REGISTRATION_INPUT).fill(settings.car_registration)
    await page.locator(SEARCH_VEHICLE_BUTTON).click()
    await page.wait_for_load_state("networkidle")


async def accept_terms(page: Page, settings: Settings) -> None:
    await page.locator(AGREE_CHECKBOX).check()
    await page.locator(PRIVACY_CHECKBOX).check()


async def confirm_vehicle(page: Page, settings: Settings) -> None:
    await page.locator(CONFIRM_VEHICLE_BUTTON).click()
    await page.wait_for_load_state("networkidle")


async def manage_booking(page: Page, settings: Settings) -> None:
    await page.locator(MANAGE_BOOKING_BUTTON).click()
    await page.wait_for_load_state("networkidle")


async def submit_booking_id(page: Page, settings: Settings) -> None:
    await page.locator(BOOKING_ID_INPUT).fill(settings.booking_id)
    await page.locator(RESCHEDULE_BUTTON).click()
    await page.wait_for_load_state("networkidle")


async def confirm_booking(page: Page, settings: Settings) -> None:
    await page.locator(CONFIRM_BOOKING_BUTTON).click()
    await page.wait_for_load_state("networkidle")


async def show_more_centers(page: Page, settings: Settings) -> None:
    await page.locator(SHOW_MORE_CENTERS).click()
    await page.wait_for_timeout(settings.browser.reveal_delay_ms)
    await page.locator(CENTERS_DROPDOWN).wait_for(state="visible")


# endregion


FORM_STEPS: tuple[FormStep, ...] = (
    FormStep("open_start_page", open_start_page),
    FormStep("accept_cookies", accept_cookies, optional=True),
    FormStep("search_vehicle", search_vehicle),
    FormStep("accept_terms", accept_terms),
    FormStep("confirm_vehicle", confirm_vehicle),
    FormStep("manage_booking", manage_booking),
    FormStep("submit_booking_id", submit_booking_id),
    FormStep("confirm_booking", confirm_booking),
    FormStep("show_more_centers", show_more_centers),
)


async def run_form_flow(
    page: Page,
    settings: Settings,
    steps: Sequence[FormStep] = FORM_STEPS,
) -> List[StepOutcome]:
    """
    Walk the booking form up to the centre selection dropdown.

    Optional steps that fail are recorded as skipped; any other failure
    raises FormStepError naming the step.
    """
    outcomes: List[StepOutcome] = []
    for step in steps:
        logger.info("Form step: %s", step.name)
        try:
            await step.action(page, settings)
        except Exception as e:  # noqa: BLE001
            if not step.optional:
                logger.error("Form step %s failed: %s", step.name, e)
                raise FormStepError(step.name, e) from e
            logger.info("Optional step %s skipped: %s", step.name, e)
            outcomes.append(StepOutcome(name=step.name, status=StepStatus.SKIPPED, detail=str(e)))
            continue
        outcomes.append(StepOutcome(name=step.name, status=StepStatus.DONE))
    return outcomes


async def read_first_date(page: Page, center: str, browser_cfg: BrowserConfig) -> Optional[str]:
    """
    Select ``center`` and return the raw value of its first offered day.

    Сайт отдаёт даты по возрастанию, поэтому первая считается самой ранней;
    сами мы не сортируем. Returns None when the centre offers no days.
    """
    await page.select_option(CENTERS_DROPDOWN, label=center)
    # Форма отправляется сама после выбора
    await page.wait_for_load_state("networkidle")
    await page.wait_for_timeout(browser_cfg.settle_delay_ms)

    options = page.locator(DATE_OPTIONS)
    count = await options.count()
    logger.info("%s: found %s available date slots", center, count)
    if count == 0:
        return None

    value = await options.first.get_attribute(DATE_ATTRIBUTE)
    if not value:
        raise ValueError(f"First date option for {center!r} has no {DATE_ATTRIBUTE}")
    return value


async def reset_center_view(page: Page, browser_cfg: BrowserConfig) -> None:
    """Reopen the extended centre list so the next centre starts from the same state."""
    await page.locator(SHOW_MORE_CENTERS).click()
    await page.wait_for_timeout(browser_cfg.reset_delay_ms)


class NCTBrowser:
    """
    High-level wrapper around Playwright to work with ncts.ie.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def page(self) -> Page:
        if not self._page:
            raise RuntimeError("Browser not initialised")
        return self._page

    async def _ensure_browser(self) -> None:
        if self._browser:
            return

        cfg = self._settings.browser
        logger.info("Starting Playwright browser (headless=%s)", cfg.headless)
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=cfg.headless)
        self._context = await self._browser.new_context(
            viewport={"width": 1280, "height": 720},
            user_agent=USER_AGENT,
        )
        self._page = await self._context.new_page()
        self._page.set_default_timeout(cfg.action_timeout_ms)

    async def close(self) -> None:
        """Close browser and Playwright."""
        logger.info("Closing Playwright browser")
        if self._context:
            await self._context.close()
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()

        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    @asynccontextmanager
    async def session(self) -> AsyncIterator["NCTBrowser"]:
        """
        Async context manager for using browser.

        Пример:
            async with NCTBrowser(settings).session() as nct:
                await nct.open_center_selection()
        """
        try:
            await self._ensure_browser()
            yield self
        finally:
            await self.close()

    async def open_center_selection(self) -> List[StepOutcome]:
        return await run_form_flow(self.page, self._settings)

    async def probe(self, center: str) -> Optional[str]:
        """Read the first offered day for ``center``, then reopen the centre list."""
        cfg = self._settings.browser
        try:
            return await read_first_date(self.page, center, cfg)
        finally:
            try:
                await reset_center_view(self.page, cfg)
            except Exception as e:  # noqa: BLE001
                logger.warning("Could not reopen centre list after %s: %s", center, e)


__all__ = [
    "FORM_STEPS",
    "FormStep",
    "FormStepError",
    "NCTBrowser",
    "read_first_date",
    "reset_center_view",
    "run_form_flow",
]
