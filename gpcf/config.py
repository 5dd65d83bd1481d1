# gpcf/config.py
import os
import logging

# Read version from VERSION file
_version_file = os.path.join(os.path.dirname(__file__), "..", "VERSION")
try:
    with open(os.path.abspath(_version_file), "r") as f:
        __version__ = f.read().strip()
except FileNotFoundError:
    __version__ = "0.0.0"

_SUPPORTED_BACKENDS = ("numpy",)


class _GPCFConfig:
    def __init__(self):
        self.version = __version__
        self.backend = None
        self.dtype_resolved = None
        # logger lives in config
        self.logger = logging.getLogger("gpcf")
        if not self.logger.handlers:
            h = logging.StreamHandler()
            h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
            self.logger.addHandler(h)
        self.logger.setLevel(logging.WARNING)

    def __str__(self):
        return (
            f"GPCFConfig("
            f"version={self.version}, "
            f"backend={self.backend}, "
            f"dtype={self.dtype_resolved})"
        )

    def __repr__(self):
        return (
            f"<GPCFConfig "
            f"version={self.version!r}, "
            f"backend={self.backend!r}, "
            f"dtype={self.dtype_resolved!r}>"
        )


_config = _GPCFConfig()


def get_config():
    return _config


def _detect_backend():
    env = os.environ.get("GPCF_BACKEND")
    if env:
        return env
    return "numpy"


def init_backend():
    """Idempotent. Detect and store backend, set env for downstream imports."""
    if _config.backend is None:
        backend = _detect_backend()
        _config.backend = backend
        os.environ["GPCF_BACKEND"] = backend
    return _config.backend


def set_backend(backend: str):
    """Force a backend before importing gpcf.num. Only 'numpy' is available."""
    if backend not in _SUPPORTED_BACKENDS:
        raise ValueError("backend must be 'numpy'")
    _config.backend = backend
    os.environ["GPCF_BACKEND"] = backend


def get_backend():
    """Return current backend; triggers detection if not set."""
    return _config.backend or init_backend()


def get_logger():
    return _config.logger


def set_log_level(level):
    _config.logger.setLevel(level)
