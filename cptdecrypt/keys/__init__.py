from .unwrapper import KeyUnwrapper, UnwrappedSecret
from .keystore import KeyContainerStore

__all__ = [
    "KeyUnwrapper",
    "UnwrappedSecret",
    "KeyContainerStore"
]
