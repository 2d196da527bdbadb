__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'boa'
__author__ = 'boa contributors'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .coercion import *
from .faults import *
from .formatting import *
from .items import *
from .kinds import *
from .loader import *
from .parsing import *
from .results import *
from .scanner import *
from .utils import Unset

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
    "Unset",
)

# Load the exposed API of the kinds
__all__ += kinds.__all__  # type: ignore[attr-defined]
# Load the exposed API of the items
__all__ += items.__all__  # type: ignore[attr-defined]
# Load the exposed API of the coercion table
__all__ += coercion.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the engine
__all__ += parsing.__all__  # type: ignore[attr-defined]
# Load the exposed API of the scanner
__all__ += scanner.__all__  # type: ignore[attr-defined]
# Load the exposed API of the formatting
__all__ += formatting.__all__  # type: ignore[attr-defined]
# Load the exposed API of the results
__all__ += results.__all__  # type: ignore[attr-defined]
# Load the exposed API of the loader
__all__ += loader.__all__  # type: ignore[attr-defined]
