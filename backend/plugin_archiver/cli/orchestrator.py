"""Client-side driver for the discover, chunk, finalize sequence."""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

import requests

DEFAULT_WORKER_URL = "http://localhost:8787"
DEFAULT_DELAY_SECONDS = 0.1
PREVIEW_FILES = 5


class OrchestratorState(str, Enum):
    DISCOVERING = "discovering"
    PROCESSING_CHUNK = "processing_chunk"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class PhaseFailedError(Exception):
    """A phase call failed; the whole run has to be restarted from discovery."""

    def __init__(self, phase: OrchestratorState, message: str) -> None:
        super().__init__(f"{phase.value} failed: {message}")
        self.phase = phase
        self.message = message


@dataclass(slots=True)
class DownloadResult:
    path: Path
    total_files: int
    total_chunks: int
    files_processed: int


EventCallback = Callable[[OrchestratorState, str], None]


class DownloadOrchestrator:
    """Calls the worker strictly in sequence with a fixed pause between chunks.

    There is no retry and no resume: any failure moves to ``FAILED`` and raises.
    """

    def __init__(
        self,
        worker_url: str = DEFAULT_WORKER_URL,
        session: Optional[Any] = None,
        sleep: Callable[[float], None] = time.sleep,
        delay: float = DEFAULT_DELAY_SECONDS,
        timeout: float = 300.0,
        on_event: Optional[EventCallback] = None,
    ) -> None:
        self.worker_url = worker_url.rstrip("/")
        self.session = session or requests.Session()
        self.sleep = sleep
        self.delay = delay
        self.timeout = timeout
        self.on_event = on_event
        self.state = OrchestratorState.DISCOVERING

    def run(self, slug: str, output_dir: Path = Path("downloads")) -> DownloadResult:
        try:
            return self._run(slug, output_dir)
        except PhaseFailedError:
            self.state = OrchestratorState.FAILED
            raise

    def _run(self, slug: str, output_dir: Path) -> DownloadResult:
        url = f"{self.worker_url}/generate-zip/{slug}"

        self._enter(OrchestratorState.DISCOVERING, f"Getting file listing for {slug}")
        info = self._get_json(url)
        try:
            total_chunks = int(info["totalChunks"])
            total_files = int(info["totalFiles"])
            paths = [item["path"] for item in info.get("files", [])]
        except (KeyError, TypeError, ValueError) as exc:
            raise PhaseFailedError(self.state, f"Malformed discovery response: {exc}") from exc
        self._emit(f"Found {total_files} files to process in {total_chunks} chunks")
        preview = paths[:PREVIEW_FILES]
        if preview:
            more = "\n  ..." if len(paths) > PREVIEW_FILES else ""
            self._emit("Files found:\n  " + "\n  ".join(preview) + more)

        files_processed = 0
        for index in range(total_chunks):
            self._enter(OrchestratorState.PROCESSING_CHUNK, f"Processing chunk {index + 1}/{total_chunks}")
            result = self._get_json(url, params={"chunk": index, "total": total_chunks})
            try:
                processed = int(result["filesProcessed"])
            except (KeyError, TypeError, ValueError) as exc:
                raise PhaseFailedError(self.state, f"Malformed chunk response: {exc}") from exc
            files_processed += processed
            self._emit(f"Processed chunk {index + 1}/{total_chunks} ({processed} files)")
            self.sleep(self.delay)

        self._enter(OrchestratorState.FINALIZING, "Generating final ZIP file")
        response = self._get(url, params={"chunk": -2, "total": total_chunks})
        output_path = output_dir / f"{slug}.zip"
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(response.content)
        except OSError as exc:
            raise PhaseFailedError(self.state, f"Cannot write {output_path}: {exc}") from exc

        self._enter(OrchestratorState.DONE, f"Successfully downloaded {slug} to {output_path}")
        return DownloadResult(
            path=output_path,
            total_files=total_files,
            total_chunks=total_chunks,
            files_processed=files_processed,
        )

    def _get(self, url: str, params: Optional[dict[str, int]] = None) -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except (requests.RequestException, OSError) as exc:
            raise PhaseFailedError(self.state, str(exc)) from exc
        if not 200 <= response.status_code < 300:
            raise PhaseFailedError(self.state, f"HTTP {response.status_code}: {_error_detail(response)}")
        return response

    def _get_json(self, url: str, params: Optional[dict[str, int]] = None) -> dict[str, Any]:
        response = self._get(url, params=params)
        try:
            payload = response.json()
        except ValueError as exc:
            raise PhaseFailedError(self.state, f"Invalid JSON response: {exc}") from exc
        if not isinstance(payload, dict):
            raise PhaseFailedError(self.state, "Unexpected response body")
        if payload.get("status") == "error":
            raise PhaseFailedError(self.state, str(payload.get("error")))
        return payload

    def _enter(self, state: OrchestratorState, message: str) -> None:
        self.state = state
        self._emit(message)

    def _emit(self, message: str) -> None:
        if self.on_event is not None:
            self.on_event(self.state, message)


def _error_detail(response: Any) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and "error" in payload:
        return str(payload["error"])
    return response.text


__all__ = [
    "DEFAULT_WORKER_URL",
    "DownloadOrchestrator",
    "DownloadResult",
    "OrchestratorState",
    "PhaseFailedError",
]
