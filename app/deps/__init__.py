from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.schedulers.base import BaseScheduler
from dishka import AsyncContainer, Provider, Scope, make_async_container
from dishka.integrations.fastapi import FastapiProvider
from pydantic_settings import BaseSettings

from app.deps.db import DbConnectionProvider
from app.deps.http import HttpClientProvider
from app.services.budgets import BudgetServicesProvider
from app.services.export import ExportServicesProvider
from app.services.providers.aggregates import SqlAlchemyTransactionAggregates
from app.services.providers.protocols.aggregates import ITransactionAggregates
from app.services.providers.protocols.webhook import IWebhookDispatcher
from app.services.providers.webhook import HttpxWebhookDispatcher
from app.services.summary import SummaryServicesProvider
from app.services.transactions import TransactionServicesProvider
from app.settings.app import AppSettings
from app.settings.budgets import BudgetSettings
from app.settings.db import DatabaseSettings


class AppProvider(Provider):
    def register_settings(self, settings: type[BaseSettings]):
        self.provide(lambda: settings(), scope=Scope.APP, provides=settings)


def create_container(*extra_providers: Provider) -> AsyncContainer:
    provider = AppProvider()
    provider.register_settings(DatabaseSettings)
    provider.register_settings(AppSettings)
    provider.register_settings(BudgetSettings)

    provider.provide(
        SqlAlchemyTransactionAggregates,
        provides=ITransactionAggregates,
        scope=Scope.APP,
    )
    provider.provide(
        HttpxWebhookDispatcher, provides=IWebhookDispatcher, scope=Scope.APP
    )
    provider.provide(
        lambda: AsyncIOScheduler(), provides=BaseScheduler, scope=Scope.APP
    )

    container = make_async_container(
        provider,
        DbConnectionProvider(),
        HttpClientProvider(),
        TransactionServicesProvider(),
        BudgetServicesProvider(),
        SummaryServicesProvider(),
        ExportServicesProvider(),
        FastapiProvider(),
        *extra_providers,
    )
    return container
