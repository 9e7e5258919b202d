"""Worker para enviar correos de confirmación en segundo plano."""

import asyncio
import logging
from uuid import uuid4

from app.application.interfaces.notification_gateway import (
    ConfirmacionReservaEmail,
    NotificationDispatcher,
    NotificationGateway,
)

logger = logging.getLogger(__name__)


class QueuedNotificationDispatcher(NotificationDispatcher):
    """
    Dispatcher con cola acotada y un worker asíncrono.

    Las operaciones de reservas solo encolan; el worker entrega cada correo al
    gateway. El resultado del envío nunca vuelve a quien encoló.

    Características:
    - Cola acotada: si está llena el correo se descarta y se registra
    - Fallas del gateway registradas en el log, sin reintentos
    - Graceful shutdown: drena la cola antes de detenerse
    """

    def __init__(
        self,
        gateway: NotificationGateway,
        max_queue_size: int = 100,
        worker_id: str | None = None,
    ) -> None:
        """
        Inicializa el dispatcher.

        Args:
            gateway: Gateway que envía el correo.
            max_queue_size: Capacidad máxima de la cola.
            worker_id: Identificador del worker (auto-generado si no se provee).
        """
        self._gateway = gateway
        self._max_queue_size = max_queue_size
        self._worker_id = worker_id or f"notifier-{uuid4().hex[:8]}"
        self._queue: asyncio.Queue[ConfirmacionReservaEmail] | None = None
        self._task: asyncio.Task | None = None
        self.sent_count = 0
        self.failed_count = 0
        self.dropped_count = 0

    @property
    def worker_id(self) -> str:
        return self._worker_id

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue else 0

    def dispatch(self, email: ConfirmacionReservaEmail) -> bool:
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self._max_queue_size)
        try:
            self._queue.put_nowait(email)
        except asyncio.QueueFull:
            self.dropped_count += 1
            logger.warning(
                "Notification queue full, email dropped",
                extra={
                    "worker_id": self._worker_id,
                    "numero_reserva": email.numero_reserva,
                    "queue_size": self._max_queue_size,
                },
            )
            return False
        return True

    async def start(self) -> None:
        """Arranca el worker en el event loop actual."""
        if self.is_running:
            return
        # Cola nueva en el loop actual, conservando lo encolado antes del arranque
        previous, self._queue = self._queue, asyncio.Queue(maxsize=self._max_queue_size)
        while previous is not None and not previous.empty():
            self._queue.put_nowait(previous.get_nowait())
        self._task = asyncio.create_task(self._run(), name=self._worker_id)
        logger.info(f"NotificationDispatcher {self._worker_id} iniciado")

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Espera a que se vacíe la cola (con timeout) y detiene el worker."""
        if not self._task:
            return
        if self._queue is not None:
            try:
                await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "Notification queue not drained before shutdown",
                    extra={"worker_id": self._worker_id, "pending": self.pending},
                )
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(f"NotificationDispatcher {self._worker_id} detenido")

    async def drain(self) -> None:
        """Procesa lo encolado en el task actual (sin worker)."""
        if self._queue is None:
            return
        while not self._queue.empty():
            email = self._queue.get_nowait()
            try:
                await self._deliver(email)
            finally:
                self._queue.task_done()

    async def _run(self) -> None:
        while True:
            email = await self._queue.get()
            try:
                await self._deliver(email)
            except Exception as e:
                logger.exception(f"Error en ciclo del notificador: {e}")
            finally:
                self._queue.task_done()

    async def _deliver(self, email: ConfirmacionReservaEmail) -> None:
        result = await self._gateway.send_reservation_confirmation(email)
        if result.success:
            self.sent_count += 1
            logger.info(
                "Confirmation email sent",
                extra={"numero_reserva": email.numero_reserva, "worker_id": self._worker_id},
            )
        else:
            self.failed_count += 1
            logger.error(
                "Confirmation email failed",
                extra={
                    "numero_reserva": email.numero_reserva,
                    "error": result.error,
                    "worker_id": self._worker_id,
                },
            )
