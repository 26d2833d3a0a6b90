"""
Module for running space exports through Notion's internal API.
"""

import time
from typing import Any, Callable, Dict, Optional

import requests
from rich.console import Console

from .config import ExportSettings
from .constants import (
    ENQUEUE_TASK_ENDPOINT,
    EXPORT_EVENT_NAME,
    GET_TASKS_ENDPOINT,
    NOTION_API_BASE_URL,
    REQUEST_TIMEOUT_SECONDS,
)
from .exceptions import (
    ExportFailedError,
    ExportTimeoutError,
    RemoteRejectedError,
    TransportError,
)
from .models import ExportJob, ExportState

console = Console()


class NotionExportClient:
    """Class for submitting a space export and waiting for its archive."""

    def __init__(
        self,
        settings: ExportSettings,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the client with explicit settings and an optional session."""
        self.settings = settings
        self.session = session if session is not None else self._create_session(settings)
        self._sleep = sleep
        self._clock = clock

    @staticmethod
    def _create_session(settings: ExportSettings) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            "Content-Type": "application/json",
            "x-notion-active-user-header": settings.user_id,
        })
        session.cookies.set("token_v2", settings.token)
        return session

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{NOTION_API_BASE_URL}/{endpoint}"
        try:
            response = self.session.post(url, json=payload, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request to {endpoint} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteRejectedError(f"Response from {endpoint} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise RemoteRejectedError(f"Unexpected response from {endpoint}: {data!r}")
        return data

    def submit_export(self, space_id: str, export_format: str, locale: str, time_zone: str) -> str:
        """
        Enqueue an export of the whole space.

        Args:
            space_id: Notion space to export
            export_format: Export type, e.g. "markdown" or "html"
            locale: Locale used for dates and labels in the export
            time_zone: Time zone used for dates in the export

        Returns:
            str: Identifier of the enqueued task

        Raises:
            TransportError: If the request fails
            RemoteRejectedError: If the response carries no task identifier
        """
        task = {
            "eventName": EXPORT_EVENT_NAME,
            "request": {
                "spaceId": space_id,
                "exportOptions": {
                    "exportType": export_format,
                    "timeZone": time_zone,
                    "locale": locale,
                },
            },
        }
        data = self._post(ENQUEUE_TASK_ENDPOINT, {"task": task})

        task_id = data.get("taskId")
        if not task_id:
            raise RemoteRejectedError(f"Export request was not accepted: {data!r}")

        console.print(f"Started Export as task [bold cyan]\\[{task_id}][/bold cyan].\n")
        return task_id

    def get_task(self, task_id: str) -> ExportJob:
        """Fetch the current status of a task."""
        data = self._post(GET_TASKS_ENDPOINT, {"taskIds": [task_id]})

        results = data.get("results")
        if not isinstance(results, list):
            raise RemoteRejectedError(f"Task status response has no results: {data!r}")

        for task in results:
            if isinstance(task, dict) and task.get("id") == task_id:
                return ExportJob.from_task(task)

        raise RemoteRejectedError(f"Task {task_id} is missing from the status response.")

    def await_completion(
        self,
        task_id: str,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
        on_progress: Optional[Callable[[ExportJob], None]] = None,
    ) -> str:
        """
        Poll a task until it succeeds and return its download URL.

        Args:
            task_id: Task returned by submit_export
            poll_interval: Seconds between polls (default: settings.poll_interval)
            timeout: Give up after this many seconds; None polls forever
            on_progress: Called with every non-failed job snapshot

        Returns:
            str: URL of the export archive

        Raises:
            ExportFailedError: If the task reports an error
            ExportTimeoutError: If the timeout elapses first
        """
        interval = self.settings.poll_interval if poll_interval is None else poll_interval
        deadline = None if timeout is None else self._clock() + timeout

        while True:
            self._sleep(interval)
            job = self.get_task(task_id)

            if job.state is ExportState.FAILED:
                raise ExportFailedError(job.error or "task finished in a failed state")

            console.print(f"Exported {job.pages_exported} pages.")
            if on_progress is not None:
                on_progress(job)

            if job.is_terminal:
                if not job.download_url:
                    raise RemoteRejectedError(f"Task {task_id} succeeded without an export URL.")
                console.print("\n[bold green]Export finished.[/bold green]")
                return job.download_url

            if deadline is not None and self._clock() >= deadline:
                raise ExportTimeoutError(
                    f"Export task {task_id} did not finish within {timeout:g} seconds."
                )

    def export_space(self, on_progress: Optional[Callable[[ExportJob], None]] = None) -> str:
        """Submit an export with the configured options and wait for its URL."""
        task_id = self.submit_export(
            self.settings.space_id,
            self.settings.export_format,
            self.settings.locale,
            self.settings.time_zone,
        )
        return self.await_completion(
            task_id,
            timeout=self.settings.export_timeout,
            on_progress=on_progress,
        )
