"""Circuit Breaker Utility

Implements the circuit breaker pattern to stop hammering a failing dependency.

States:
- CLOSED: Normal operation, requests allowed
- OPEN: After failure threshold, requests rejected without being attempted
- HALF_OPEN: After cooldown, a single probe request at a time

State Transitions:
- CLOSED → OPEN: After failure_threshold consecutive failures
- OPEN → HALF_OPEN: After cooldown_seconds
- HALF_OPEN → CLOSED: After success_threshold consecutive successes
- HALF_OPEN → OPEN: On any failure
"""

import threading
import time
from typing import Awaitable, Callable, Dict, Optional, TypeVar

import structlog

from tieredpdf.models.resilience import (
    CircuitBreakerConfig,
    CircuitBreakerState,
    CircuitState,
)
from tieredpdf.observability.metrics import CIRCUIT_BREAKER_STATE, CIRCUIT_STATE_VALUES
from tieredpdf.utils.exceptions import CircuitOpenError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class CircuitBreaker:
    """Thread-safe circuit breaker implementation.

    Tracks failures and successes to determine when to open/close the circuit.
    Automatically transitions from OPEN to HALF_OPEN after cooldown period.
    State is only touched under the lock; the wrapped call runs outside it.
    """

    def __init__(
        self,
        name: str,
        config: Optional[CircuitBreakerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize circuit breaker.

        Args:
            name: Identifier for this circuit breaker (e.g., "vision")
            config: Circuit breaker configuration
            clock: Monotonic time source, replaceable in tests
        """
        self.name = name
        self.config = config or CircuitBreakerConfig()
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._total_successes = 0
        self._total_failures = 0
        self._last_failure_time: Optional[float] = None
        self._probe_in_flight = False
        self._lock = threading.RLock()
        self._publish_state()

    @property
    def state(self) -> CircuitState:
        """Get current state, auto-transitioning OPEN to HALF_OPEN after cooldown."""
        with self._lock:
            if self._state == CircuitState.OPEN and self._cooldown_elapsed():
                self._transition(CircuitState.HALF_OPEN)
                self._success_count = 0
                self._probe_in_flight = False
            return self._state

    @property
    def failure_count(self) -> int:
        """Get consecutive failure count."""
        with self._lock:
            return self._failure_count

    @property
    def success_count(self) -> int:
        """Get consecutive half-open success count."""
        with self._lock:
            return self._success_count

    def _cooldown_elapsed(self) -> bool:
        if self._last_failure_time is None:
            return True
        return self._clock() - self._last_failure_time >= self.config.cooldown_seconds

    def _cooldown_remaining(self) -> float:
        if self._state != CircuitState.OPEN or self._last_failure_time is None:
            return 0.0
        elapsed = self._clock() - self._last_failure_time
        return max(0.0, self.config.cooldown_seconds - elapsed)

    def _transition(self, new_state: CircuitState) -> None:
        if new_state == self._state:
            return
        logger.info(
            "circuit_breaker_transition",
            breaker=self.name,
            from_state=self._state.value,
            to_state=new_state.value,
            failure_count=self._failure_count,
        )
        self._state = new_state
        self._publish_state()

    def _publish_state(self) -> None:
        CIRCUIT_BREAKER_STATE.labels(breaker=self.name).set(
            CIRCUIT_STATE_VALUES[self._state.value]
        )

    def _acquire(self) -> None:
        """Admit one call or raise CircuitOpenError."""
        with self._lock:
            current = self.state
            if current == CircuitState.OPEN:
                raise CircuitOpenError(self.name, self._cooldown_remaining())
            if current == CircuitState.HALF_OPEN:
                if self._probe_in_flight:
                    raise CircuitOpenError(self.name)
                self._probe_in_flight = True

    def record_success(self) -> None:
        """Record a successful request."""
        with self._lock:
            self._total_successes += 1
            self._failure_count = 0

            if self._state == CircuitState.HALF_OPEN:
                self._probe_in_flight = False
                self._success_count += 1
                if self._success_count >= self.config.success_threshold:
                    self._transition(CircuitState.CLOSED)
                    self._success_count = 0

    def record_failure(self) -> None:
        """Record a failed request."""
        with self._lock:
            self._total_failures += 1
            self._failure_count += 1
            self._success_count = 0
            self._last_failure_time = self._clock()

            if self._state == CircuitState.HALF_OPEN:
                # Any failure in HALF_OPEN reopens the circuit
                self._probe_in_flight = False
                self._transition(CircuitState.OPEN)
            elif self._state == CircuitState.CLOSED:
                if self._failure_count >= self.config.failure_threshold:
                    self._transition(CircuitState.OPEN)

    async def execute(self, func: Callable[[], Awaitable[T]]) -> T:
        """Run `func` through the breaker.

        Args:
            func: Async callable to protect

        Returns:
            Result of `func`

        Raises:
            CircuitOpenError: If the circuit rejects the call; `func` is not called
            Exception: Whatever `func` raised, after recording the failure
        """
        if not self.config.enabled:
            return await func()

        self._acquire()
        try:
            result = await func()
        except BaseException:
            self.record_failure()
            raise
        self.record_success()
        return result

    def allow_request(self) -> bool:
        """Check if a request would currently be admitted (no side effects)."""
        with self._lock:
            current = self.state
            if current == CircuitState.HALF_OPEN:
                return not self._probe_in_flight
            return current == CircuitState.CLOSED

    def get_state(self) -> CircuitBreakerState:
        """Snapshot of the breaker state."""
        with self._lock:
            return CircuitBreakerState(
                state=self.state,
                failure_count=self._failure_count,
                success_count=self._success_count,
                last_failure_time=self._last_failure_time,
            )

    def reset(self) -> None:
        """Manually reset circuit breaker to CLOSED state."""
        with self._lock:
            self._transition(CircuitState.CLOSED)
            self._failure_count = 0
            self._success_count = 0
            self._last_failure_time = None
            self._probe_in_flight = False

    def get_stats(self) -> Dict:
        """Get circuit breaker statistics.

        Returns:
            Dictionary with state and counter information
        """
        with self._lock:
            return {
                "name": self.name,
                "state": self.state.value,
                "failure_count": self._failure_count,
                "success_count": self._success_count,
                "total_successes": self._total_successes,
                "total_failures": self._total_failures,
                "cooldown_remaining": self._cooldown_remaining(),
            }


class CircuitBreakerRegistry:
    """Thread-safe singleton registry for circuit breakers.

    Hands out one breaker per name for the whole process, so every document
    processed by this service shares the same view of a downstream dependency.
    """

    _instance: Optional["CircuitBreakerRegistry"] = None
    _lock = threading.Lock()

    # Instance attributes declared for type checking
    _breakers: Dict[str, CircuitBreaker]
    _registry_lock: threading.RLock

    def __new__(cls) -> "CircuitBreakerRegistry":
        """Ensure singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._breakers = {}
                cls._instance._registry_lock = threading.RLock()
            return cls._instance

    @classmethod
    def clear_instance(cls) -> None:
        """Clear singleton instance (for testing)."""
        with cls._lock:
            cls._instance = None

    def get_or_create(
        self, name: str, config: Optional[CircuitBreakerConfig] = None
    ) -> CircuitBreaker:
        """Get or create a circuit breaker by name.

        Args:
            name: Unique identifier for the circuit breaker
            config: Configuration for new circuit breakers (ignored if it exists)

        Returns:
            Circuit breaker instance
        """
        with self._registry_lock:
            if name not in self._breakers:
                self._breakers[name] = CircuitBreaker(name, config)
            return self._breakers[name]

    def get(self, name: str) -> Optional[CircuitBreaker]:
        """Get an existing circuit breaker by name."""
        with self._registry_lock:
            return self._breakers.get(name)

    def get_all_stats(self) -> Dict[str, Dict]:
        """Get statistics for all circuit breakers."""
        with self._registry_lock:
            return {name: cb.get_stats() for name, cb in self._breakers.items()}

    def reset_all(self) -> None:
        """Reset all circuit breakers to CLOSED state."""
        with self._registry_lock:
            for cb in self._breakers.values():
                cb.reset()
