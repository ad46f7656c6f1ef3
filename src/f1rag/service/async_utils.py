"""Helpers for driving async backend clients from synchronous code."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any


def run_async(coro: Any) -> Any:
    """Run an async coroutine to completion from synchronous code.

    The pipeline is synchronous, while the LLM clients expose async
    generation. Without a running loop in this thread the coroutine runs on
    a fresh event loop that is closed afterwards. When called from inside a
    running loop (an async server calling the pipeline directly), the
    coroutine runs on its own loop in a worker thread instead, since the
    current loop cannot be re-entered.

    Args:
        coro: An awaitable coroutine to execute

    Returns:
        The result of the coroutine
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with ThreadPoolExecutor(max_workers=1) as executor:
        return executor.submit(asyncio.run, coro).result()
