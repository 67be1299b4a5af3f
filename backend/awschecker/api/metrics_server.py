"""Sidecar HTTP server exposing /metrics."""

import traceback
from typing import Optional

from aiohttp import web

from awschecker.core.logging import logger
from awschecker.core.protocols.probe_metrics import ProbeMetrics


class MetricsServer:
    """Async HTTP server that serves the rendered metrics on ``GET /metrics``."""

    def __init__(self, metrics: ProbeMetrics, port: int = 8080, host: str = "0.0.0.0"):
        """Initialize the metrics server.

        Args:
            metrics: Recorder whose observations are served on each scrape.
            port: The port to listen on; 0 picks a free port.
            host: The host to listen on.
        """
        self._metrics = metrics
        self._port = port
        self._host = host
        self.app = web.Application()
        self.app.add_routes([web.get("/metrics", self._handle_metrics)])
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self.logger = logger.with_context(component="metrics_server")

    async def _handle_metrics(self, request: web.Request) -> web.Response:
        """Serialize the metrics on each scrape.

        Args:
            request: The request to handle.

        Returns:
            The exposition body, or a 500 if rendering failed.
        """
        try:
            body = self._metrics.render()
        except Exception as e:
            self.logger.error(f"Error rendering metrics: {e}\n{traceback.format_exc()}")
            return web.Response(text="Error\n", status=500)
        return web.Response(body=body, headers={"Content-Type": self._metrics.content_type})

    @property
    def port(self) -> Optional[int]:
        """The bound port once started, else None."""
        if self._runner is None or not self._runner.addresses:
            return None
        return self._runner.addresses[0][1]

    async def start(self) -> None:
        """Start serving. Raises OSError if the address cannot be bound."""
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, host=self._host, port=self._port)
        try:
            await self._site.start()
        except OSError:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            raise
        self.logger.info(f"Metrics server listening on http://{self._host}:{self.port}/metrics")

    async def stop(self) -> None:
        """Stops the server gracefully. A no-op when not started."""
        if self._site:
            await self._site.stop()
            self._site = None
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
