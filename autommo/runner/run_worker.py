#!/usr/bin/env python3
"""Main entry point: log in, then drive the game until shut down.

The worker loop and the HTTP control surface share one event loop. When
uvicorn receives a shutdown signal it stops serving, and the worker task is
cancelled, which tears down any open verification challenge.

Usage:
    python -m autommo.runner.run_worker
    python -m autommo.runner.run_worker --enabled --headless
    python -m autommo.runner.run_worker --config config/worker_config.yaml --port 9090
"""

from __future__ import annotations

import argparse
import asyncio
import logging

import uvicorn
from dotenv import load_dotenv
from playwright.async_api import async_playwright

from autommo.browser.dom import PlaywrightDom
from autommo.browser.session import authenticate, launch
from autommo.config import PROJECT_ROOT, EnabledFlag, WorkerConfig, load_config
from autommo.runner.control import create_app
from autommo.runner.metrics import MmoMetrics
from autommo.runner.worker import Worker

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s: %(message)s",
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


async def run(config: WorkerConfig) -> None:
    enabled = EnabledFlag(config.start_enabled)
    metrics = MmoMetrics(enabled)

    server = uvicorn.Server(
        uvicorn.Config(
            app=create_app(enabled),
            host=config.server.host,
            port=config.server.port,
            log_level="warning",
            access_log=False,
        )
    )

    async with async_playwright() as playwright:
        browser, page = await launch(playwright, headless=config.browser.headless)
        try:
            await authenticate(page, config, metrics)
            await page.goto(config.site.travel_url)

            worker = Worker(PlaywrightDom(page), config, metrics, enabled)
            worker.subscribe()

            worker_task = asyncio.create_task(worker.run(), name="worker")
            server_task = asyncio.create_task(server.serve(), name="control-server")
            logger.info(
                f"Control surface on http://{config.server.host}:{config.server.port} "
                f"(worker {'enabled' if enabled.is_enabled else 'disabled'})"
            )

            done, pending = await asyncio.wait(
                {worker_task, server_task}, return_when=asyncio.FIRST_COMPLETED
            )
            server.should_exit = True
            for task in pending:
                task.cancel()
            await asyncio.wait(pending)
            for task in done:
                # Surface a crashed worker or server.
                task.result()
        finally:
            await browser.close()


def main():
    parser = argparse.ArgumentParser(description="Run the SimpleMMO worker")
    parser.add_argument("--config", default=None, help="Path to worker_config.yaml")
    parser.add_argument("--headless", action="store_true", help="Run Chromium headless")
    parser.add_argument("--enabled", action="store_true", help="Start with the worker enabled")
    parser.add_argument("--port", type=int, default=None, help="Control surface port")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    load_dotenv(PROJECT_ROOT / ".env")
    setup_logging(args.log_level)

    config = load_config(args.config)
    if args.headless:
        config.browser.headless = True
    if args.enabled:
        config.start_enabled = True
    if args.port is not None:
        config.server.port = args.port

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
