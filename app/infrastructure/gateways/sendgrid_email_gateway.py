"""
Envío del correo de confirmación de reserva usando la API v3 de SendGrid.

El gateway nunca lanza: cualquier falla (HTTP, timeout, circuito abierto)
se devuelve como NotificationResult(success=False).
"""

import asyncio
import html
import logging
from datetime import datetime

import httpx

from app.application.interfaces.notification_gateway import (
    ConfirmacionReservaEmail,
    NotificationGateway,
    NotificationResult,
)
from app.infrastructure.circuit_breaker import CircuitBreakerError, email_breaker

logger = logging.getLogger(__name__)

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"

_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="es">
<head><meta charset="UTF-8"><title>Confirmación de Reserva - CitiLights</title></head>
<body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: 0 auto;">
  <div style="background-color: #2563eb; color: white; padding: 20px; text-align: center;">
    <h1>CitiLights</h1>
    <h2>Confirmación de Reserva</h2>
  </div>
  <div style="background-color: #f9fafb; padding: 30px;">
    <p>Estimado/a <strong>{nombre_usuario}</strong>,</p>
    <p>Tu reserva ha sido <strong>confirmada exitosamente</strong>.</p>
    <h3>Detalles de tu Reserva</h3>
    <p><strong>Número de Reserva:</strong> {numero_reserva}</p>
    <p><strong>Área Reservada:</strong> {nombre_area}</p>
    <p><strong>Fecha:</strong> {fecha_reserva}</p>
    <p><strong>Horario:</strong> {hora_inicio} - {hora_fin}</p>
    {precio_html}
    <h3>Información Importante</h3>
    <ul>
      <li>Por favor, llega <strong>15 minutos antes</strong> de tu horario reservado</li>
      <li>Presenta este email como comprobante de tu reserva</li>
      <li>Si necesitas cancelar, hazlo con al menos 2 horas de anticipación</li>
      <li>Mantén el área limpia y en orden después de su uso</li>
    </ul>
    <p>¡Gracias por elegir CitiLights!</p>
  </div>
  <div style="text-align: center; font-size: 12px; color: #6b7280;">
    <p>Este es un email automático, por favor no respondas a este mensaje.</p>
    <p>CitiLights - Sistema de Gestión de Áreas Comunes</p>
    <p>Generado el {generado}</p>
  </div>
</body>
</html>
"""

_TEXT_TEMPLATE = """Confirmación de Reserva - CitiLights

Estimado/a {nombre_usuario},

Tu reserva ha sido confirmada exitosamente.

Detalles de la Reserva:
- Número: {numero_reserva}
- Área: {nombre_area}
- Fecha: {fecha_reserva}
- Horario: {hora_inicio} - {hora_fin}
{precio_text}
¡Gracias por elegir CitiLights!
"""


def render_confirmation(email: ConfirmacionReservaEmail) -> tuple[str, str, str]:
    """
    Renderiza el correo de confirmación.

    Returns:
        (subject, html, text)
    """
    values = {
        "nombre_usuario": email.nombre_usuario,
        "numero_reserva": email.numero_reserva,
        "nombre_area": email.nombre_area,
        "fecha_reserva": email.fecha_reserva,
        "hora_inicio": email.hora_inicio,
        "hora_fin": email.hora_fin,
    }
    precio = f"${email.precio:.2f}" if email.precio else None

    html_body = _HTML_TEMPLATE.format(
        **{key: html.escape(str(value)) for key, value in values.items()},
        precio_html=f"<p><strong>Precio:</strong> {precio}</p>" if precio else "",
        generado=datetime.now().strftime("%d/%m/%Y %H:%M:%S"),
    )
    text_body = _TEXT_TEMPLATE.format(
        **values, precio_text=f"- Precio: {precio}\n" if precio else ""
    )
    subject = f"Reserva Confirmada - {email.nombre_area} | CitiLights"
    return subject, html_body, text_body


class SendGridEmailGateway(NotificationGateway):
    """Envío de correos usando la API HTTP de SendGrid."""

    def __init__(
        self,
        api_key: str,
        sender: str = "citylights@noreply.com",
        timeout: float = 10.0,
        api_url: str = SENDGRID_API_URL,
    ) -> None:
        if not api_key:
            raise ValueError("SENDGRID_API_KEY es requerida")
        self._api_key = api_key
        self._sender = sender
        self._timeout = timeout
        self._api_url = api_url

    async def send_reservation_confirmation(
        self, email: ConfirmacionReservaEmail
    ) -> NotificationResult:
        subject, html_body, text_body = render_confirmation(email)
        payload = {
            "personalizations": [{"to": [{"email": email.email_destino}]}],
            "from": {"email": self._sender},
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": text_body},
                {"type": "text/html", "value": html_body},
            ],
        }
        logger.info(
            "Sending reservation confirmation",
            extra={"email_destino": email.email_destino, "numero_reserva": email.numero_reserva},
        )
        try:
            await asyncio.to_thread(email_breaker.call, self._post, payload)
        except CircuitBreakerError as e:
            logger.error("Email circuit breaker is open", extra={"circuit_state": str(e)})
            return NotificationResult(
                success=False,
                message="Error enviando email de confirmación",
                error="circuit open",
            )
        except httpx.HTTPStatusError as e:
            logger.error(
                "SendGrid API error",
                extra={
                    "status_code": e.response.status_code,
                    "body": e.response.text[:200],
                    "numero_reserva": email.numero_reserva,
                },
            )
            return NotificationResult(
                success=False,
                message="Error enviando email de confirmación",
                error=f"HTTP {e.response.status_code}",
            )
        except httpx.HTTPError as e:
            logger.error(
                "SendGrid request failed",
                exc_info=e,
                extra={"numero_reserva": email.numero_reserva},
            )
            return NotificationResult(
                success=False,
                message="Error enviando email de confirmación",
                error=str(e) or e.__class__.__name__,
            )
        except Exception as e:  # noqa: BLE001
            logger.exception(
                "Unexpected error sending confirmation email",
                extra={"numero_reserva": email.numero_reserva},
            )
            return NotificationResult(
                success=False,
                message="Error enviando email de confirmación",
                error=str(e) or e.__class__.__name__,
            )

        return NotificationResult(
            success=True, message="Email de confirmación enviado exitosamente"
        )

    def _post(self, payload: dict) -> None:
        with httpx.Client(timeout=self._timeout) as client:
            response = client.post(
                self._api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
            response.raise_for_status()
