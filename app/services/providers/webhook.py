import logging

import httpx

from app.schemas.budgets import BudgetOverspendPayload
from app.services.providers.protocols.webhook import IWebhookDispatcher
from app.settings.budgets import BudgetSettings

logger = logging.getLogger(__name__)


class HttpxWebhookDispatcher(IWebhookDispatcher):
    def __init__(self, settings: BudgetSettings, client: httpx.AsyncClient) -> None:
        self.url = settings.notify_webhook_url
        self.client = client

    async def dispatch(self, payload: BudgetOverspendPayload) -> None:
        if self.url is None:
            logger.debug("Budget webhook is not configured, skipping dispatch")
            return
        response = await self.client.post(
            str(self.url), json=payload.model_dump(mode="json")
        )
        response.raise_for_status()
        logger.info("Budget overspend webhook delivered to %s", self.url)
