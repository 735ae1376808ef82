"""
Logfire configuration and initialization.

Logfire provides structured logging and tracing for pipeline runs, step
calls and API requests.

Environment Variables:
    LOGFIRE_TOKEN: Logfire project token (optional; without it spans stay local)
    ENVIRONMENT: deployment environment (development, staging, production)
"""
import os
from typing import Optional

import logfire


class LogfireConfig:
    """
    Logfire configuration singleton.

    Ensures Logfire is configured only once per process. Without a token the
    service still runs and logs locally; nothing is sent to Logfire.
    """

    _initialized = False

    @classmethod
    def initialize(
        cls,
        token: Optional[str] = None,
        service_name: str = "text-pipeline-api",
        console: bool = True,
    ) -> None:
        """
        Initialize Logfire and instrument pydantic-ai.

        Args:
            token: Logfire project token (or set LOGFIRE_TOKEN env var)
            service_name: Name reported on every span
            console: Whether to echo logs to the console
        """
        if cls._initialized:
            return

        token = token or os.getenv("LOGFIRE_TOKEN")

        logfire.configure(
            token=token or None,
            service_name=service_name,
            environment=os.getenv("ENVIRONMENT", "development"),
            send_to_logfire=bool(token),
            console=None if console else False,
        )
        logfire.instrument_pydantic_ai()

        cls._initialized = True

        if not token:
            logfire.info("Logfire token not set, spans are kept local", service_name=service_name)
