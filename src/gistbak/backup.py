"""gist backup

fetch every gist page, clone or pull each gist into the workspace,
then optionally pack the workspace into one archive.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncContextManager, Callable, TypeAlias

from ._listing import iter_pages, open_client
from ._listing.web import Lister
from .archive import create_archive
from .config import ApiConfig, BackupOptions, Config
from .parser import parse_url
from .sync import SyncAction, sync_repo
from .workspace import Workspace, acquire_workspace

logger = logging.getLogger(__name__)

ClientFactory: TypeAlias = Callable[[str, ApiConfig], AsyncContextManager[Lister]]


@dataclass
class BackupStats:
    pages: int = 0
    cloned: int = 0
    updated: int = 0

    @property
    def total(self) -> int:
        return self.cloned + self.updated


async def sync_gists(client: Lister, workspace: Workspace, config: Config) -> BackupStats:
    stats = BackupStats()
    pages = iter_pages(client, config.api.max_retries, config.api.retry_wait)

    async for page, gists in pages:
        logger.debug(f"page {page} has {len(gists)} gists")
        stats.pages += 1
        for gist in gists:
            repo = parse_url(gist.git_pull_url)
            action = sync_repo(repo, workspace.path, config.git.clone_args)
            # let a pending interrupt cancel the run between items
            await asyncio.sleep(0)
            if action is SyncAction.CLONED:
                stats.cloned += 1
            else:
                stats.updated += 1

    return stats


async def _sync_all(
    options: BackupOptions,
    workspace: Workspace,
    config: Config,
    client_factory: ClientFactory,
) -> BackupStats:
    async with client_factory(options.token, config.api) as client:
        return await sync_gists(client, workspace, config)


def backup(
    options: BackupOptions,
    config: Config,
    client_factory: ClientFactory = open_client,
) -> BackupStats:
    with acquire_workspace(options.directory) as workspace:
        logger.debug("into asyncio runtime")
        stats = asyncio.run(_sync_all(options, workspace, config, client_factory))
        logger.info(
            f"{stats.total} gists backed up "
            f"({stats.cloned} cloned, {stats.updated} updated)"
        )

        if options.archive is not None:
            create_archive(workspace.path, options.archive)

    return stats
