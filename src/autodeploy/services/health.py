#!/usr/bin/env python3
"""
Post-deployment health verification.

Checks the configured health-check URL with a bounded number of attempts.
Each attempt is cancelled once the configured timeout elapses, instead of
relying on the HTTP client's own timeouts.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import httpx

from autodeploy import __version__
from autodeploy.core.config import DEFAULT_HEALTH_CHECK_TIMEOUT, DeploymentRequest


logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5
DEFAULT_RETRY_DELAY = 10.0
USER_AGENT = f"autodeploy-health-checker/{__version__}"


@dataclass(frozen=True)
class HealthVerdict:
    """Outcome of one health-check call."""

    healthy: bool
    error: Optional[str] = None
    response_time_ms: Optional[float] = None
    status_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class HealthVerifier:
    """
    Bounded-retry liveness checker.

    Retry policy is a fixed delay between attempts. The first 2xx response
    ends the check; otherwise the last attempt's failure is the verdict.
    """

    def __init__(
        self,
        request: DeploymentRequest,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        max_attempts: int = MAX_ATTEMPTS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            request: Deployment request carrying the URL and timeout
            retry_delay: Seconds to wait between failed attempts (0 disables)
            max_attempts: Number of check attempts
            transport: Optional httpx transport, used by tests
        """
        self.request = request
        self.retry_delay = retry_delay
        self.max_attempts = max_attempts
        self.transport = transport

    @property
    def timeout(self) -> int:
        return self.request.health_check_timeout or DEFAULT_HEALTH_CHECK_TIMEOUT

    def perform_health_check(self) -> HealthVerdict:
        """Run the health check; healthy without probing when no URL is set."""
        url = self.request.health_check_url
        if not url:
            return HealthVerdict(healthy=True)
        return asyncio.run(self._check(url))

    async def _check(self, url: str) -> HealthVerdict:
        verdict: Optional[HealthVerdict] = None

        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=httpx.Timeout(None),
            headers={"User-Agent": USER_AGENT},
        ) as client:
            for attempt in range(1, self.max_attempts + 1):
                final = attempt == self.max_attempts
                started = time.perf_counter()

                try:
                    response = await asyncio.wait_for(client.get(url), timeout=self.timeout)
                except asyncio.TimeoutError:
                    failure = f"Health check timed out after {self.timeout}s"
                    status_code = None
                except Exception as e:
                    failure = str(e) or type(e).__name__
                    status_code = None
                else:
                    elapsed_ms = (time.perf_counter() - started) * 1000
                    if response.is_success:
                        return HealthVerdict(
                            healthy=True,
                            response_time_ms=elapsed_ms,
                            status_code=response.status_code,
                        )
                    failure = f"HTTP {response.status_code}: {response.reason_phrase}"
                    status_code = response.status_code

                elapsed_ms = (time.perf_counter() - started) * 1000
                if final:
                    verdict = HealthVerdict(
                        healthy=False,
                        error=failure,
                        response_time_ms=elapsed_ms,
                        status_code=status_code,
                    )
                    break

                logger.debug(
                    "Health check attempt %d/%d failed (%s), retrying in %ss",
                    attempt,
                    self.max_attempts,
                    failure,
                    self.retry_delay,
                )
                if self.retry_delay > 0:
                    await asyncio.sleep(self.retry_delay)

        return verdict or HealthVerdict(healthy=False, error="Max retries exceeded")
