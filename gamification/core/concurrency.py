import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List

logger = logging.getLogger(__name__)


@dataclass
class FanOutResult:
    succeeded: List[Any] = field(default_factory=list)
    failed: List[Dict[str, Any]] = field(default_factory=list)

    def summary(self, describe: Callable[[Any], Dict[str, Any]]) -> dict:
        return {
            "succeeded": len(self.succeeded),
            "failed": [{**describe(item["item"]), "error": item["error"]} for item in self.failed],
        }


async def fan_out(
    items: Iterable[Any],
    worker: Callable[[Any], Awaitable[Any]],
    limit: int
) -> FanOutResult:
    """
    Run `worker` over `items` with at most `limit` in flight

    Each item ends up in either `succeeded` (the worker's return value) or
    `failed` ({"item", "error"}). Input order is kept.
    """
    semaphore = asyncio.Semaphore(max(1, limit))
    items = list(items)

    async def run(item):
        async with semaphore:
            return await worker(item)

    outcomes = await asyncio.gather(*(run(item) for item in items), return_exceptions=True)

    result = FanOutResult()
    for item, outcome in zip(items, outcomes):
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, Exception):
            logger.warning("Fan-out item failed: %s", outcome)
            result.failed.append({"item": item, "error": str(outcome)})
        else:
            result.succeeded.append(outcome)
    return result
