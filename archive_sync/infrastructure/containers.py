"""
Dependency Injection container for the archive_sync component.

This container uses the `dependency-injector` library to wire together all
the components of the application, such as services and infrastructure adapters,
based on the application's configuration. Command-line values, when given,
take precedence over the settings file.
"""

from dependency_injector import containers, providers

from ..application.dates import build_date_range
from ..application.dispatcher import FetchDispatcher
from ..application.domain import Downloader, Verifier
from ..application.naming import ResourceNamer
from ..application.planner import ReconciliationPlanner
from ..application.service import ArchiveSyncService
from ..settings import settings

from .downloader import HttpBatchDownloader, open_http_client
from .transport_models import TransportOptions
from .verification import GzipVerifier


def _prefer(override, default):
    """Returns the command-line value unless it was not given."""
    return default if override is None else override


class Container(containers.DeclarativeContainer):
    """DI container for wiring the application components."""

    cli_args = providers.Configuration()

    config = providers.Object(settings)

    date_range = providers.Callable(
        build_date_range,
        start=providers.Callable(
            _prefer, cli_args.start, config.provided.sync.start_date
        ),
        end=providers.Callable(
            _prefer, cli_args.end, config.provided.sync.end_date
        ),
    )

    transport_options = providers.Singleton(
        TransportOptions.from_settings,
        config.provided.transport,
        max_concurrent_downloads=cli_args.concurrency,
    )

    http_client = providers.Resource(
        open_http_client,
        options=transport_options,
    )

    namer = providers.Factory(
        ResourceNamer,
        base_url=config.provided.sync.archive_base_url,
        download_dir=providers.Callable(
            _prefer, cli_args.download_dir, config.provided.paths.download_dir
        ),
    )

    verifier: providers.Factory[Verifier] = providers.Factory(
        GzipVerifier,
        workers=config.provided.sync.verify_workers,
    )

    downloader: providers.Factory[Downloader] = providers.Factory(
        HttpBatchDownloader,
        client=http_client,
        options=transport_options,
    )

    planner = providers.Factory(
        ReconciliationPlanner,
        namer=namer,
        verifier=verifier,
    )

    dispatcher = providers.Factory(
        FetchDispatcher,
        downloader=downloader,
    )

    sync_service = providers.Factory(
        ArchiveSyncService,
        planner=planner,
        dispatcher=dispatcher,
    )
