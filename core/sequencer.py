"""
Sequencer — Drives a linear script of dependent async steps.

A script is a generator function. Every `yield` is a suspension point:
yield an awaitable and the sequencer awaits it and sends the settled value
back in; yield a plain value and it comes straight back unchanged. The
script can therefore mix immediate and deferred steps freely:

    def script(store):
        entries = yield store.get_entries()
        count = yield len(entries)
        return count

    count = await run_script(script, store)

Errors raised by an awaited step are thrown into the script at the yield
that produced it. Left unhandled they abort the script and propagate
unchanged out of run_script; no later step runs. Steps are strictly
sequential and there is no built-in timeout or cancellation.
"""
from __future__ import annotations

import asyncio
import inspect
import structlog
from typing import Any, Callable, Generator

logger = structlog.get_logger()

Script = Callable[..., Generator[Any, Any, Any]]


async def run_script(script: Script, *args, **kwargs) -> Any:
    """Run `script(*args, **kwargs)` to completion and return its result."""
    generator = script(*args, **kwargs)
    name = getattr(script, "__name__", repr(script))

    send_value: Any = None
    error: BaseException | None = None
    step = 0

    try:
        while True:
            try:
                if error is not None:
                    pending, error = error, None
                    value = generator.throw(pending)
                else:
                    value = generator.send(send_value)
            except StopIteration as done:
                logger.debug("script_finished", script=name, steps=step)
                return done.value

            step += 1
            if not inspect.isawaitable(value):
                send_value = value
                continue

            logger.debug("script_step_pending", script=name, step=step)
            try:
                send_value = await value
            except asyncio.CancelledError:
                raise
            except Exception as e:
                send_value = None
                error = e
    finally:
        generator.close()


def sequence(script: Script, *args, **kwargs) -> asyncio.Task:
    """Schedule a script on the running loop and return its task."""
    return asyncio.create_task(run_script(script, *args, **kwargs))
