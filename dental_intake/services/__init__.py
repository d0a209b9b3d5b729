# Mark services as a package and expose modules that tests monkeypatch.

from . import storage as storage  # noqa: F401
from . import providers as providers  # noqa: F401

__all__ = [
    "storage",
    "providers",
]
