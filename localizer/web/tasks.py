"""
Background sync jobs

The HTTP API starts long sync runs here instead of blocking the request:
- SyncRequest: what to run (operation, keys/values or document, options)
- SyncJob: one run and its lifecycle (pending, running, then one of
  completed, failed or cancelled)
- JobRegistry: thread-safe store of jobs; finished jobs expire after a
  retention window

Each job runs its coroutine with asyncio.run() in a daemon thread.
Cancellation is cooperative: the sync engine polls the job's flag before
every document read and write.
"""

from __future__ import annotations

import asyncio
import threading
import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from localizer.core.sync import SyncOptions, SyncResult, ensure_keys, sync_file, sync_keys
from localizer.logger import get_logger

logger = get_logger(__name__)

SYNC_OPERATIONS = ("sync_keys", "sync_file", "ensure_keys")
FINISHED_STATES = frozenset({"completed", "failed", "cancelled"})
JOB_RETENTION_SECONDS = 600


@dataclass
class SyncRequest:
    operation: str
    translations_root: str
    keys: List[str] = field(default_factory=list)
    values: Dict[str, str] = field(default_factory=dict)
    file_path: Optional[str] = None
    base_locale: str = "en"
    locales: Optional[List[str]] = None
    force: bool = False
    overwrite_targets: bool = False
    timeout: Optional[float] = None

    def options(self, should_cancel) -> SyncOptions:
        return SyncOptions(
            base_locale=self.base_locale,
            locales=self.locales,
            force=self.force,
            overwrite_targets=self.overwrite_targets,
            timeout=self.timeout,
            should_cancel=should_cancel,
        )

    def coroutine(self, options: SyncOptions):
        if self.operation == "sync_keys":
            return sync_keys(self.translations_root, self.keys, options)
        if self.operation == "sync_file":
            return sync_file(self.translations_root, self.file_path, options)
        return ensure_keys(self.translations_root, self.keys, self.values, options)


@dataclass
class SyncJob:
    job_id: str
    request: SyncRequest
    state: str = "pending"
    cancel_requested: bool = False
    created_at: float = field(default_factory=time.time)
    started_at: Optional[float] = None
    finished_at: Optional[float] = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.state in FINISHED_STATES

    def expired(self, now: float) -> bool:
        return self.finished_at is not None and now - self.finished_at > JOB_RETENTION_SECONDS

    def finish(self, state: str, result: Optional[SyncResult] = None, error: Optional[str] = None) -> None:
        self.state = state
        self.result = result.to_dict() if result is not None else None
        self.error = error
        self.finished_at = time.time()

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        request = payload.pop("request")
        payload["operation"] = request.pop("operation")
        payload["request"] = request
        return payload


class JobRegistry:
    """Jobs by id, guarded by one lock shared with the worker threads."""

    def __init__(self):
        self._jobs: Dict[str, SyncJob] = {}
        self._lock = threading.Lock()

    def _prune(self) -> None:
        now = time.time()
        for job_id in [job_id for job_id, job in self._jobs.items() if job.expired(now)]:
            del self._jobs[job_id]

    def add(self, request: SyncRequest) -> SyncJob:
        job = SyncJob(job_id=uuid.uuid4().hex, request=request)
        with self._lock:
            self._prune()
            self._jobs[job.job_id] = job
        return job

    def get(self, job_id: str) -> Optional[SyncJob]:
        with self._lock:
            self._prune()
            return self._jobs.get(job_id)

    def cancel(self, job_id: str) -> bool:
        """Flag a job for cancellation; False when it is unknown or already finished."""
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None or job.finished:
                return False
            job.cancel_requested = True
            return True

    def cancel_requested(self, job: SyncJob) -> bool:
        with self._lock:
            return job.cancel_requested

    def run(self, job: SyncJob) -> None:
        """Execute a job to completion in the calling thread."""
        job.state = "running"
        job.started_at = time.time()
        request = job.request
        try:
            options = request.options(lambda: self.cancel_requested(job))
            result = asyncio.run(request.coroutine(options))
        except Exception as e:
            job.finish("failed", error=f"{type(e).__name__}: {e}")
            logger.exception("Sync job %s crashed", job.job_id)
            return

        if result.cancelled:
            state = "cancelled"
        elif result.failures:
            state = "failed"
        else:
            state = "completed"
        job.finish(state, result)
        logger.info("Sync job %s %s: %s", job.job_id, state, result)


registry = JobRegistry()


def create_sync_job(operation: str, translations_root, **fields) -> SyncJob:
    """
    Register a sync job and start it in a daemon thread.

    Args:
        operation: One of SYNC_OPERATIONS
        translations_root: Locale documents root
        **fields: Remaining SyncRequest fields (keys, values, file_path, options)

    Returns:
        The registered job; poll get_job() for its state.
    """
    if operation not in SYNC_OPERATIONS:
        raise ValueError(f"Unknown sync operation: {operation}")
    fields = {name: value for name, value in fields.items() if value is not None}
    request = SyncRequest(operation=operation, translations_root=str(translations_root), **fields)
    job = registry.add(request)

    threading.Thread(target=registry.run, args=(job,), name=f"sync-job-{job.job_id}", daemon=True).start()
    logger.info(
        "Sync job %s started: %s (%s)",
        job.job_id,
        operation,
        request.file_path or f"{len(request.keys)} keys",
    )
    return job


def get_job(job_id: str) -> Optional[SyncJob]:
    return registry.get(job_id)


def cancel_job(job_id: str) -> bool:
    cancelled = registry.cancel(job_id)
    if cancelled:
        logger.info("Cancellation requested for sync job %s", job_id)
    return cancelled


def serialize_job(job: SyncJob) -> Dict[str, Any]:
    return job.to_dict()
