from .reader import ContainerReader, Container, ContainerEntry

__all__ = [
    "ContainerReader",
    "Container",
    "ContainerEntry"
]
