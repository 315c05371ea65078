import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Set, Tuple

from overlay_relay.alert_log.ports.alert_log_port import IAlertLog
from overlay_relay.core.alert import Alert, utc_now
from overlay_relay.core.events import create_all_alerts_message, create_new_alert_message


logger = logging.getLogger(__name__)

# Close code sent to a viewer dropped for falling behind ("try again later")
_SLOW_CONSUMER_CLOSE_CODE = 1013


def _current_task() -> Optional[asyncio.Task]:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


@dataclass
class ViewerConnection:
    """A connected overlay surface and its outgoing message queue."""

    websocket: Any
    queue: asyncio.Queue
    connection_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    connected_at: datetime = field(default_factory=utc_now)
    writer_task: Optional[asyncio.Task] = None


class AlertRelay:
    """Replays the alert log to new viewers and fans out new alerts.

    Every viewer has its own bounded queue drained by its own writer task,
    so a slow or broken connection never holds up the others or the
    webhook intake. ``connect`` and ``publish`` touch the queues without
    suspending; callers on the event loop therefore see a consistent order
    between log appends, replays and live pushes.
    """

    def __init__(self, alert_log: IAlertLog, max_queue_size: int = 100) -> None:
        """
        Initialize the relay.

        Args:
            alert_log: Log replayed to each new viewer
            max_queue_size: Pending messages a viewer may lag behind before it is dropped
        """
        if max_queue_size < 1:
            raise ValueError(f"max_queue_size must be positive, got {max_queue_size}")
        self._alert_log = alert_log
        self._max_queue_size = max_queue_size
        self._viewers: Dict[str, ViewerConnection] = {}
        self._background: Set[asyncio.Task] = set()

    @property
    def active_count(self) -> int:
        return len(self._viewers)

    @property
    def viewers(self) -> Tuple[ViewerConnection, ...]:
        return tuple(self._viewers.values())

    async def connect(self, websocket: Any) -> ViewerConnection:
        """Accept a viewer, queue the full log for it and start its writer."""
        await websocket.accept()

        # No await from here on: snapshot and registration must not interleave
        # with an append + publish, or the viewer could see an alert twice.
        viewer = ViewerConnection(
            websocket=websocket,
            queue=asyncio.Queue(maxsize=self._max_queue_size),
        )
        snapshot = self._alert_log.snapshot()
        viewer.queue.put_nowait(create_all_alerts_message(snapshot))
        self._viewers[viewer.connection_id] = viewer
        viewer.writer_task = asyncio.create_task(self._writer(viewer))

        logger.info(
            "Viewer %s connected with %s alerts replayed. Total viewers: %s",
            viewer.connection_id,
            len(snapshot),
            len(self._viewers),
        )
        return viewer

    def disconnect(self, viewer: ViewerConnection) -> None:
        """Remove a viewer from the broadcast set. Safe to call more than once."""
        removed = self._viewers.pop(viewer.connection_id, None)

        task = viewer.writer_task
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()

        if removed is not None:
            logger.info(
                "Viewer %s disconnected. Total viewers: %s",
                viewer.connection_id,
                len(self._viewers),
            )

    def publish(self, alert: Alert) -> int:
        """
        Queue a new alert for every connected viewer.

        Args:
            alert: Alert just appended to the log

        Returns:
            Number of viewers the alert was queued for
        """
        message = create_new_alert_message(alert)
        delivered = 0
        for viewer in list(self._viewers.values()):
            try:
                viewer.queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning(
                    "Viewer %s fell %s messages behind; dropping it",
                    viewer.connection_id,
                    self._max_queue_size,
                )
                self._drop(viewer)
                continue
            delivered += 1

        logger.debug("Alert %s queued for %s viewers", alert.id, delivered)
        return delivered

    async def close(self) -> None:
        """Disconnect every viewer and wait for their writers to stop."""
        tasks = [v.writer_task for v in self._viewers.values() if v.writer_task is not None]
        for viewer in list(self._viewers.values()):
            self.disconnect(viewer)
        tasks.extend(self._background)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _writer(self, viewer: ViewerConnection) -> None:
        """Send queued messages to one viewer until cancelled or the send fails."""
        try:
            while True:
                message = await viewer.queue.get()
                await viewer.websocket.send_json(message)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error("Error sending to viewer %s: %s", viewer.connection_id, exc)
            self.disconnect(viewer)

    def _drop(self, viewer: ViewerConnection) -> None:
        self.disconnect(viewer)
        task = asyncio.create_task(self._close_quietly(viewer))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    @staticmethod
    async def _close_quietly(viewer: ViewerConnection) -> None:
        try:
            await viewer.websocket.close(code=_SLOW_CONSUMER_CLOSE_CODE)
        except Exception as exc:
            logger.debug("Closing viewer %s failed: %s", viewer.connection_id, exc)
