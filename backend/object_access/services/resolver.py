"""Batch resolution: concurrent existence checks, fail-fast, concurrent signing, keyed aggregation.

Per key:   pending -> checked (present | absent) -> signed | skipped
Per batch: resolving -> short-circuited | aggregated

A fatal reason (forbidden, moved, unknown) found by any existence check aborts
the whole batch before a single signing call is made. Not-found keys are
recorded in the result and the rest of the batch carries on. No retries.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TypeVar, Union

from object_access.core.config import AccessConfig
from object_access.core.metrics import record_batch_size, record_short_circuit
from object_access.services.classifier import FailureReason
from object_access.services.storage.base import ExistenceResult, SignedAccessResult, StorageGateway
from object_access.services.validation import AccessRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")

KeyOutcome = Union[str, FailureReason]


@dataclass(frozen=True)
class BatchOutcome:
    """Either a single short-circuit failure or one entry per requested key."""

    failure: FailureReason | None = None
    results: dict[str, KeyOutcome] = field(default_factory=dict)

    @classmethod
    def short_circuit(cls, reason: FailureReason) -> "BatchOutcome":
        return cls(failure=reason)

    @property
    def short_circuited(self) -> bool:
        return self.failure is not None


@dataclass(frozen=True)
class SingleOutcome:
    url: str | None = None
    failure: FailureReason | None = None


def _first_fatal(reasons: Iterable[FailureReason | None]) -> FailureReason | None:
    for reason in reasons:
        if reason is not None and reason.is_fatal:
            return reason
    return None


class BatchResolver:
    """Resolve an AccessRequest against a storage gateway."""

    def __init__(self, gateway: StorageGateway, config: AccessConfig) -> None:
        self._gateway = gateway
        self._config = config

    async def _fan_out(self, keys: Iterable[str], call: Callable[[str], Awaitable[T]]) -> dict[str, T]:
        """Run call(key) for every key with bounded concurrency; wait for all. Results keyed, not positional."""
        sem = asyncio.Semaphore(self._config.max_concurrency)

        async def run(key: str) -> tuple[str, T]:
            async with sem:
                return key, await call(key)

        return dict(await asyncio.gather(*(run(k) for k in keys)))

    # Gateway calls take the decoded storage key; results stay keyed by the requested key
    async def _check_all(self, request: AccessRequest) -> dict[str, ExistenceResult]:
        return await self._fan_out(
            request.keys,
            lambda key: self._gateway.check_exists(request.container, request.storage_key(key)),
        )

    async def _sign_all(self, request: AccessRequest, keys: list[str]) -> dict[str, SignedAccessResult]:
        return await self._fan_out(
            keys,
            lambda key: self._gateway.issue_signed_access(request.container, request.storage_key(key), request.ttl),
        )

    async def resolve_batch(self, request: AccessRequest) -> BatchOutcome:
        record_batch_size(len(request.keys))
        logger.debug("begin: existence checks bucket=%s keys=%d", request.container, len(request.keys))
        checks = await self._check_all(request)

        # Scan in request order so the reported failure does not depend on completion order
        fatal = _first_fatal(checks[k].reason for k in request.keys)
        if fatal is not None:
            logger.warning(
                "batch short-circuited at existence check bucket=%s reason=%s",
                request.container, fatal.label,
            )
            record_short_circuit(fatal.label)
            return BatchOutcome.short_circuit(fatal)

        results: dict[str, KeyOutcome] = {}
        present: list[str] = []
        for key in request.keys:
            check = checks[key]
            if check.present:
                present.append(key)
            else:
                results[key] = check.reason

        logger.debug(
            "begin: signing bucket=%s present=%d absent=%d",
            request.container, len(present), len(results),
        )
        signed = await self._sign_all(request, present)

        if self._config.signing_failures_fatal:
            fatal = _first_fatal(signed[k].reason for k in present)
            if fatal is not None:
                logger.warning(
                    "batch short-circuited at signing bucket=%s reason=%s",
                    request.container, fatal.label,
                )
                record_short_circuit(fatal.label)
                return BatchOutcome.short_circuit(fatal)

        for key in present:
            result = signed[key]
            results[key] = result.url if result.ok else (result.reason or FailureReason.UNKNOWN)

        logger.debug("end: batch resolved bucket=%s keys=%d", request.container, len(results))
        return BatchOutcome(results=results)

    async def resolve_one(self, request: AccessRequest) -> SingleOutcome:
        """Single-object path: same pipeline with one key; any failure fails the request."""
        key = request.storage_key(request.keys[0])
        check = await self._gateway.check_exists(request.container, key)
        if not check.present:
            return SingleOutcome(failure=check.reason)
        signed = await self._gateway.issue_signed_access(request.container, key, request.ttl)
        if not signed.ok:
            return SingleOutcome(failure=signed.reason or FailureReason.UNKNOWN)
        return SingleOutcome(url=signed.url)
