"""clusterconf - cluster configuration storage and activation engine."""

__version__ = "0.1.0"

from clusterconf.core import *  # noqa: F401,F403
from clusterconf.core import __all__  # noqa: F401
