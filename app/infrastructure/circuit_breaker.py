"""
Circuit Breaker configuration for external service calls.

This module provides pre-configured Circuit Breakers for the external
services this API talks to (Stripe Checkout, SendGrid) so a failing
provider fails fast instead of piling up blocked requests.

Circuit Breaker Pattern:
- CLOSED: Normal operation, requests pass through
- OPEN: Too many failures, requests fail immediately
- HALF_OPEN: Testing if service recovered, limited requests allowed

Both breakers wrap synchronous calls; the gateways run them in a worker
thread with asyncio.to_thread.
"""

import logging

from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)


class StateChangeLogger(CircuitBreakerListener):
    """Logs circuit breaker state changes."""

    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "Circuit breaker state changed",
            extra={
                "breaker_name": self.name,
                "old_state": old_state.name if old_state else None,
                "new_state": new_state.name,
            },
        )


# Stripe Checkout
stripe_breaker = CircuitBreaker(
    fail_max=5,  # Open circuit after 5 consecutive failures
    reset_timeout=60,  # Wait 60 seconds before attempting recovery
    name="stripe_circuit_breaker",
    listeners=[StateChangeLogger("stripe")],
)


# SendGrid; failures never reach the reservation flow, the breaker only
# avoids hammering the provider while it is down
email_breaker = CircuitBreaker(
    fail_max=3,
    reset_timeout=120,
    name="email_circuit_breaker",
    listeners=[StateChangeLogger("email")],
)


__all__ = [
    "stripe_breaker",
    "email_breaker",
    "CircuitBreakerError",
]
