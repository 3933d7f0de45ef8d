"""Fan-out / fan-in helper for independent backend queries.

The newsletter digest issues several reads that do not depend on one
another.  :func:`gather_named` runs them concurrently and joins them
before returning, so callers get a plain dict of results keyed by name
and never touch a half-finished branch.

Unlike a best-effort search fan-out, a failed branch here is fatal: the
first exception propagates to the caller and the remaining branches are
cancelled.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable

import structlog

from onelove.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


async def gather_named(
    branches: dict[str, Awaitable[Any]],
    logger: structlog.BoundLogger | None = None,
) -> dict[str, Any]:
    """Await every branch concurrently and return results keyed by name.

    Parameters
    ----------
    branches:
        Mapping of branch name to awaitable.  Branches must not share
        mutable state.
    logger:
        Optional structured logger for the join summary.

    Returns
    -------
    dict[str, Any]
        ``{name: result}`` in the same key order as ``branches``.

    Raises
    ------
    Exception
        Whatever the first failing branch raised.  Pending siblings are
        cancelled before the exception leaves this function.
    """
    if logger is None:
        logger = _logger

    names = list(branches)
    tasks = [asyncio.ensure_future(branches[name]) for name in names]
    start = time.perf_counter()

    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    logger.debug(
        "fan_out_joined",
        branches=names,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return dict(zip(names, results))
