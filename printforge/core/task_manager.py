"""
Task management for background generation flows.

This module runs generation flows as asyncio tasks and provides status
lookup, cooperative cancellation, and cleanup of finished flows.
"""

import asyncio
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import structlog

from printforge.generators.models import GenerationRequest

from .generation_flow import GenerationFlow

logger = structlog.get_logger(__name__)


class TaskManager:
    """Manages background generation flows and their lifecycle."""

    def __init__(self, cleanup_interval: float = 300):
        self.tasks: Dict[str, asyncio.Task] = {}
        self.flows: Dict[str, GenerationFlow] = {}
        self.task_status: Dict[str, Dict[str, Any]] = {}
        self.cleanup_interval = cleanup_interval
        self._cleanup_task: Optional[asyncio.Task] = None

    def start_cleanup(self) -> None:
        """Start the cleanup task."""
        if self._cleanup_task is None or self._cleanup_task.done():
            self._cleanup_task = asyncio.create_task(self._periodic_cleanup())

    async def _periodic_cleanup(self) -> None:
        """Periodically clean up completed flows."""
        while True:
            try:
                await asyncio.sleep(self.cleanup_interval)
                await self.cleanup_completed_tasks()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Error in task cleanup", error=str(e))

    async def cleanup_completed_tasks(self) -> None:
        """Remove finished flows from memory.

        The status of a finished flow survives one cleanup round so the UI
        can still read it, and is dropped on the next.
        """
        expired = [handle for handle, status in self.task_status.items() if status.get("cleaned")]
        for handle in expired:
            del self.task_status[handle]

        completed = [handle for handle, task in self.tasks.items() if task.done()]

        for handle in completed:
            task = self.tasks.pop(handle)
            self.flows.pop(handle, None)
            if not task.cancelled() and task.exception() is not None:
                logger.error("Flow completed with error", handle=handle, error=str(task.exception()))
            # Keep status for UI updates but mark as cleaned
            if handle in self.task_status:
                self.task_status[handle]["cleaned"] = True

        logger.info(f"Cleaned up {len(completed)} completed tasks", expired_statuses=len(expired))

    def create_task(self, flow: GenerationFlow, request: GenerationRequest, handle: Optional[str] = None) -> str:
        """Start a flow in the background and return its handle."""
        if handle is None:
            handle = str(uuid.uuid4())

        task = asyncio.create_task(flow.run(request))
        self.tasks[handle] = task
        self.flows[handle] = flow
        self.task_status[handle] = {
            "created_at": datetime.utcnow(),
            "state": "starting",
            "task_id": None,
            "error": None,
        }
        task.add_done_callback(lambda t, h=handle: self._on_flow_done(h, t))
        return handle

    def _on_flow_done(self, handle: str, task: asyncio.Task) -> None:
        flow = self.flows.get(handle)
        if task.cancelled():
            self.update_task_status(handle, state="cancelled")
        elif task.exception() is not None:
            self.update_task_status(handle, state="error", error=str(task.exception()))
        elif flow is not None:
            self.update_task_status(
                handle,
                state=flow.state.value if flow.state else "cancelled",
                task_id=flow.task_id,
                error=flow.error_message,
            )

    def get_task_status(self, handle: str) -> Dict[str, Any]:
        """Get the current status of a flow."""
        status = self.task_status.get(handle)
        if status is None:
            return {"state": "not_found"}

        flow = self.flows.get(handle)
        if flow is not None:
            status = dict(status)
            status.update({
                "state": flow.state.value if flow.state else "starting",
                "task_id": flow.task_id,
                "finished": flow.finished,
                "error": flow.error_message,
                "attempts_made": flow.task.attempts_made if flow.task else 0,
                "progress": flow.session.progress,
                "message": flow.session.status_message,
            })
        return status

    def update_task_status(self, handle: str, **kwargs) -> None:
        """Update the status of a flow."""
        if handle in self.task_status:
            self.task_status[handle].update(kwargs)
            self.task_status[handle]["updated_at"] = datetime.utcnow()

    def cancel_task(self, handle: str) -> bool:
        """Cooperatively cancel a running flow."""
        flow = self.flows.get(handle)
        if flow is None:
            return False
        if flow.cancel():
            self.update_task_status(handle, state="cancelled")
            return True
        return False

    async def shutdown(self) -> None:
        """Shutdown the task manager and stop all flows."""
        if self._cleanup_task:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass

        for flow in self.flows.values():
            flow.cancel("shutdown")

        # Wait for all flows to wind down
        if self.tasks:
            await asyncio.gather(*self.tasks.values(), return_exceptions=True)

        self.tasks.clear()
        self.flows.clear()
        self.task_status.clear()
