from typing import AsyncIterable

import httpx
from dishka import Provider, Scope, provide

WEBHOOK_TIMEOUT = 10.0


class HttpClientProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_http_client(self) -> AsyncIterable[httpx.AsyncClient]:
        async with httpx.AsyncClient(timeout=WEBHOOK_TIMEOUT) as client:
            yield client
