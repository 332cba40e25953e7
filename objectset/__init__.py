""" imports for objectset """
from .copying import deep_copy
from .digest import deep_digest, DEFAULT_ALGORITHM
from .equality import deep_equal
from .errors import InvalidArgument
from .logs import configure_logging
from .objectset import ObjectSet
from .options import SetOptions

__version__ = "0.1.0"
