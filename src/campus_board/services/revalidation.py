"""Cache invalidation signals for the server-rendered pages.

After a successful write the services name the pages whose cached renderings
are now stale. A ``Revalidator`` collects those names during the request; once
the response is sent they are handed to a ``RevalidationNotifier`` which
delivers them to the rendering layer.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import lru_cache

import httpx

from campus_board.core.settings import settings

logger = logging.getLogger(__name__)

TOPICS_PAGE = "/topics"
ADMIN_TOPICS_PAGE = "/admin/topics"
ADMIN_COMMENTS_PAGE = "/admin/comments"
NEWS_PAGE = "/news"
ADMIN_REVIEW_PAGE = "/admin/review"
MY_SUBMISSIONS_PAGE = "/me/submissions"


def topic_page(topic_id: str) -> str:
    return f"/topics/{topic_id}"


def news_page(news_id: str) -> str:
    return f"/news/{news_id}"


def topic_transition_paths(topic_id: str) -> list[str]:
    """Pages affected by creating, locking, unlocking or deleting a topic."""
    return [TOPICS_PAGE, ADMIN_TOPICS_PAGE, topic_page(topic_id)]


def _dedupe(paths: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for path in paths:
        seen.setdefault(path, None)
    return list(seen)


class Revalidator:
    """Receives invalidation signals from the services. Subclasses implement ``_record``."""

    def revalidate(self, paths: Iterable[str]) -> None:
        unique = _dedupe(paths)
        if not unique:
            return
        logger.debug("Revalidating %s", ", ".join(unique))
        self._record(unique)

    def _record(self, paths: list[str]) -> None:
        raise NotImplementedError


class RecordingRevalidator(Revalidator):
    """Keeps the signals of one request (or one test) in memory."""

    def __init__(self) -> None:
        self._paths: list[str] = []

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    def clear(self) -> None:
        self._paths.clear()

    def _record(self, paths: list[str]) -> None:
        self._paths.extend(paths)


class RevalidationNotifier:
    """Delivers collected signals to the rendering layer."""

    async def notify(self, paths: list[str]) -> None:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class LoggingNotifier(RevalidationNotifier):
    """Used when no webhook is configured."""

    async def notify(self, paths: list[str]) -> None:
        logger.info("Pages to revalidate: %s", ", ".join(paths))


class WebhookNotifier(RevalidationNotifier):
    """POSTs ``{"paths": [...]}`` to the rendering layer's revalidate hook.

    Delivery failures are logged and dropped; the write they follow has
    already been committed.
    """

    def __init__(
        self,
        url: str,
        *,
        secret: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"X-Revalidate-Secret": secret} if secret else {}
        self._url = url
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=headers,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def notify(self, paths: list[str]) -> None:
        try:
            response = await self._client.post(self._url, json={"paths": paths})
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Revalidation webhook failed for %s: %s", paths, exc)


@lru_cache(maxsize=1)
def get_notifier() -> RevalidationNotifier:
    """Return the process-wide notifier chosen by configuration."""
    if settings.revalidate_webhook_url:
        return WebhookNotifier(
            settings.revalidate_webhook_url,
            secret=settings.revalidate_webhook_secret,
            timeout=settings.revalidate_timeout_seconds,
        )
    return LoggingNotifier()


async def flush_revalidations(
    collected: RecordingRevalidator,
    notifier: RevalidationNotifier | None = None,
) -> None:
    """Send everything ``collected`` gathered, once, after the response."""
    paths = _dedupe(collected.paths)
    if not paths:
        return
    collected.clear()
    await (notifier or get_notifier()).notify(paths)
