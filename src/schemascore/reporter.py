"""Forward schema reports to a collecting HTTP endpoint."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from schemascore.errors import ReportTransportError
from schemascore.report import report_to_dict

if TYPE_CHECKING:
    from schemascore.report import SchemaReport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ReporterConfig:
    """Reporting endpoint configuration."""

    endpoint: str
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT  # seconds


def send_report(report: SchemaReport, config: ReporterConfig) -> None:
    """POST *report* as JSON to ``config.endpoint``.

    Raises
    ------
    ReportTransportError
        On a non-2xx response, a timeout, any other transport failure, or a
        report body that cannot be encoded as JSON.
    """
    headers = {"Content-Type": "application/json", **config.headers}
    try:
        response = httpx.post(
            config.endpoint,
            headers=headers,
            json=report_to_dict(report),
            timeout=config.timeout,
        )
    except httpx.TimeoutException as exc:
        msg = f"Timed out after {config.timeout}s sending report to {config.endpoint}"
        raise ReportTransportError(msg) from exc
    except httpx.HTTPError as exc:
        msg = f"Failed to send report to {config.endpoint}: {exc}"
        raise ReportTransportError(msg) from exc
    except (TypeError, ValueError) as exc:
        msg = f"Report for {config.endpoint} is not JSON-serializable: {exc}"
        raise ReportTransportError(msg) from exc

    if not response.is_success:
        msg = f"HTTP {response.status_code}: {response.reason_phrase}"
        raise ReportTransportError(msg)

    logger.info("Report sent to %s", config.endpoint)


def _send_quietly(report: SchemaReport, config: ReporterConfig) -> None:
    try:
        send_report(report, config)
    except ReportTransportError as exc:
        logger.warning("Failed to send report: %s", exc)


def forward_report(report: SchemaReport, config: ReporterConfig) -> threading.Thread:
    """Send *report* in a background daemon thread and return the thread.

    Failures are logged and never raised.  Callers that need the POST to
    finish before exiting should ``join()`` the returned thread.
    """
    thread = threading.Thread(
        target=_send_quietly,
        args=(report, config),
        name="schemascore-reporter",
        daemon=True,
    )
    thread.start()
    return thread
