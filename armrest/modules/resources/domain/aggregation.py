"""
Fan-out listing across every resource group of a subscription.

One task per group is launched once the group list is known. The only shared
mutable state is the GroupResultAccumulator, which appends each group's
tagged batch atomically under a single lock. The call returns only after every
group task has finished.

Failure policy: per-group transport/decode failures (and per-group timeouts)
are recorded, never allowed to cancel other groups. Once all groups are done,
any recorded failure raises AggregateListError carrying the merged results of
the groups that succeeded.
"""
from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Optional

import structlog

from armrest.modules.resources.domain.accessor import ResourceAccessor
from armrest.modules.resources.domain.resource_groups import GroupEnumerator
from armrest.modules.resources.domain.url_builder import require_resource_group
from armrest.shared.core.config import get_settings
from armrest.shared.core.exceptions import (
    AggregateListError,
    ArmrestException,
    DecodeError,
    TransportError,
)

logger = structlog.get_logger()

RESOURCE_GROUP_TAG = "resourceGroup"


class GroupResultAccumulator:
    """Merge target shared by the concurrent group listings."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._items: list[dict[str, Any]] = []
        self._failures: dict[str, Exception] = {}
        self._completed: set[str] = set()

    async def append(self, group: str, items: Sequence[dict[str, Any]]) -> None:
        """Tag ``items`` with their source group and append them as one batch."""
        tagged = []
        for item in items:
            if not isinstance(item, dict):
                raise DecodeError(
                    "ARM list response contains a non-object element",
                    details={"resource_group": group},
                )
            tagged.append({**item, RESOURCE_GROUP_TAG: group})
        async with self._lock:
            self._items.extend(tagged)
            self._completed.add(group)

    async def record_failure(self, group: str, error: Exception) -> None:
        async with self._lock:
            self._failures[group] = error
            self._completed.add(group)

    @property
    def items(self) -> list[dict[str, Any]]:
        return list(self._items)

    @property
    def failures(self) -> dict[str, Exception]:
        return dict(self._failures)

    @property
    def completed_groups(self) -> set[str]:
        return set(self._completed)


class AggregatingLister:
    """
    ``list(group)`` for one group, or for all groups when ``group`` is None.
    """

    def __init__(
        self,
        accessor: ResourceAccessor,
        groups: GroupEnumerator,
        *,
        max_concurrency: Optional[int] = None,
        group_timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.accessor = accessor
        self.groups = groups
        self.max_concurrency = max_concurrency or settings.AGGREGATE_MAX_CONCURRENCY
        self.group_timeout = (
            group_timeout
            if group_timeout is not None
            else settings.AGGREGATE_GROUP_TIMEOUT_SECONDS
        )

    async def list(self, group: Optional[str] = None) -> list[dict[str, Any]]:
        if group is not None:
            return await self.accessor.list_group(require_resource_group(group))
        return await self.list_all_groups()

    async def _group_names(self) -> list[str]:
        raw_groups = await self.groups.list_resource_groups(self.accessor.subscription_id)
        names: list[str] = []
        for raw in raw_groups:
            name = raw.get("name") if isinstance(raw, dict) else None
            if not isinstance(name, str) or not name:
                raise DecodeError("resource group entry is missing 'name'")
            if name not in names:
                names.append(name)
        return names

    async def list_all_groups(self) -> list[dict[str, Any]]:
        names = await self._group_names()
        if not names:
            return []

        accumulator = GroupResultAccumulator()
        semaphore = asyncio.Semaphore(self.max_concurrency)
        resource_type = self.accessor.urls.resource_type

        async def query_group(name: str) -> None:
            async with semaphore:
                try:
                    items = await self._with_timeout(
                        lambda: self.accessor.list_group(name), name
                    )
                    await accumulator.append(name, items)
                except ArmrestException as exc:
                    logger.warning(
                        "resource_group_list_failed",
                        resource_type=resource_type,
                        resource_group=name,
                        error=exc.message,
                    )
                    await accumulator.record_failure(name, exc)

        outcomes = await asyncio.gather(
            *(query_group(name) for name in names), return_exceptions=True
        )
        # Anything other than an ArmrestException is a bug; surface it only
        # after every group has finished.
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        items = accumulator.items
        failures = accumulator.failures
        logger.info(
            "resource_groups_aggregated",
            resource_type=resource_type,
            group_count=len(names),
            item_count=len(items),
            failed_groups=sorted(failures),
        )
        if failures:
            raise AggregateListError(failures, items)
        return items

    async def _with_timeout(
        self, call: Callable[[], Awaitable[list[dict[str, Any]]]], group: str
    ) -> list[dict[str, Any]]:
        if self.group_timeout is None:
            return await call()
        try:
            return await asyncio.wait_for(call(), timeout=self.group_timeout)
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"listing resource group '{group}' timed out after {self.group_timeout}s",
                details={"resource_group": group},
            ) from exc
