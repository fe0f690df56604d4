"""
Numeric runtime readiness gate.

The pipeline depends on numpy and scikit-learn being imported and warmed up
(BLAS/OpenMP thread pools, compiled k-means kernels). `initialize()` does that
once; until it has completed, `build()` refuses work with NotReady.

Initialization runs either eagerly at application startup or lazily: a
`build()` on a cold runtime schedules it in the background and returns
NotReady, so a retry succeeds once the warm-up finishes. A failed warm-up is
kept on the init future and is retried by the next `build()`.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Dict, Optional, Sequence

import numpy as np

from palette_service.config import config
from palette_service.utils.logging import get_logger

from .errors import ComputationFailure, NotReady
from .models import PaletteResult
from .pipeline import build_palette

logger = get_logger(__name__)

_WARMUP_COLORS = ["#FF0000", "#00FF00", "#0000FF", "#FF0001"]


class PaletteRuntime:
    """Owns readiness state and default clustering parameters."""

    def __init__(self,
                 seed: int = config.RANDOM_SEED,
                 max_iter: int = config.MAX_ITER,
                 max_clusters: int = config.MAX_CLUSTERS,
                 display_weight: int = config.DISPLAY_WEIGHT):
        self.seed = seed
        self.max_iter = max_iter
        self.max_clusters = max_clusters
        self.display_weight = display_weight

        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._init_ms: Optional[float] = None
        self._last_error: Optional[str] = None

        self._init_guard = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._init_future: Optional[Future] = None

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    @property
    def initializing(self) -> bool:
        future = self._init_future
        return future is not None and not future.done()

    def initialize(self) -> None:
        """
        Load and warm up the numeric backend. Idempotent.

        Raises:
            ComputationFailure: if the warm-up run fails; the runtime stays not ready
        """
        with self._lock:
            if self._ready.is_set():
                return

            start = time.time()
            logger.info("Initializing palette runtime", extra={"numpy": np.__version__})
            try:
                import sklearn

                build_palette(_WARMUP_COLORS, 2, seed=self.seed, max_iter=self.max_iter)
            except Exception as e:
                self._last_error = str(e)
                logger.error(f"Palette runtime initialization failed: {e}")
                raise ComputationFailure("initialization", str(e)) from e

            self._init_ms = (time.time() - start) * 1000
            self._last_error = None
            self._ready.set()
            logger.info(
                "Palette runtime ready",
                extra={"ms_init": self._init_ms, "sklearn": sklearn.__version__}
            )

    def start_initialization(self) -> Future:
        """
        Schedule `initialize()` on a background thread.

        Returns the in-flight future when one is running, and the finished one
        when the runtime is already ready. A future that ended in failure is
        replaced by a fresh attempt.
        """
        with self._init_guard:
            future = self._init_future
            if future is not None and (not future.done() or self.ready):
                return future

            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="palette-init")
            logger.info("Scheduling palette runtime initialization")
            self._init_future = self._executor.submit(self.initialize)
            return self._init_future

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until initialized or until `timeout` seconds pass."""
        return self._ready.wait(timeout)

    def reset(self) -> None:
        """Return to the uninitialized state (for testing)."""
        with self._init_guard:
            future = self._init_future
            self._init_future = None
        if future is not None:
            wait([future])
        with self._lock:
            self._ready.clear()
            self._init_ms = None
            self._last_error = None

    def build(self,
              hexcodes: Sequence[str],
              cluster_count: int,
              color_space: Optional[str] = None,
              sort_order: Optional[str] = None,
              seed: Optional[int] = None) -> PaletteResult:
        """
        Run the pipeline with this runtime's defaults.

        Raises:
            NotReady: if `initialize()` has not completed; initialization is
                scheduled so that a later retry can succeed
        """
        if not self._ready.is_set():
            self.start_initialization()
            raise NotReady()
        return build_palette(
            hexcodes,
            cluster_count,
            color_space=color_space or config.DEFAULT_COLOR_SPACE,
            sort_order=sort_order or config.DEFAULT_SORT_ORDER,
            seed=self.seed if seed is None else seed,
            max_iter=self.max_iter,
            max_clusters=self.max_clusters,
            display_weight=self.display_weight
        )

    def status(self) -> Dict[str, Any]:
        return {
            "ready": self.ready,
            "initializing": self.initializing,
            "init_ms": self._init_ms,
            "last_error": self._last_error,
            "seed": self.seed,
            "max_iter": self.max_iter,
            "max_clusters": self.max_clusters
        }


# Global runtime instance
_runtime: Optional[PaletteRuntime] = None


def get_runtime() -> PaletteRuntime:
    """Get or create the global palette runtime."""
    global _runtime
    if _runtime is None:
        _runtime = PaletteRuntime()
    return _runtime
