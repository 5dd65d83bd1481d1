# gpcf/__init__.py

from . import config
from . import num
from . import errors
from . import kernel
from . import misc
from .kernel import PeriodicCovariance

__version__ = config.__version__

__all__ = ["num", "kernel", "errors", "PeriodicCovariance", "__version__"]
