"""Taichi runtime initialization.

Rendering needs double precision, so Taichi is always initialized with
``default_fp=ti.f64``. Only backends with f64 support are used: CUDA when
available, otherwise the CPU.
"""

import logging

import taichi as ti

logger = logging.getLogger(__name__)

BACKENDS = ("auto", "cpu", "cuda")

_active_backend: str | None = None


def _current_arch_name() -> str:
    if ti.lang.impl.current_cfg().arch == ti.cuda:
        return "CUDA (GPU)"
    return "CPU"


def initialize_taichi(backend: str = "auto", *, random_seed: int = 0, debug: bool = False) -> str:
    """Initialize Taichi once for the process.

    Later calls return the backend chosen by the first call without
    re-initializing, since repeated ti.init() calls invalidate existing
    fields.

    Args:
        backend: "cpu", "cuda", or "auto" (CUDA if available, else CPU).
        random_seed: Seed for Taichi's random number generator.
        debug: Enable Taichi's debug mode (bounds checking).

    Returns:
        Name of the backend being used.

    Raises:
        ValueError: If backend is not one of BACKENDS.
    """
    global _active_backend

    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}', expected one of {', '.join(BACKENDS)}")

    if _active_backend is not None:
        return _active_backend

    arch = ti.cpu if backend == "cpu" else ti.cuda
    # Taichi falls back to the CPU by itself when CUDA is unavailable
    ti.init(arch=arch, default_fp=ti.f64, random_seed=random_seed, debug=debug)

    _active_backend = _current_arch_name()
    logger.info("Taichi backend: %s", _active_backend)
    if backend == "cuda" and _active_backend == "CPU":
        logger.warning("CUDA was requested but is unavailable; running on the CPU")
    return _active_backend
