"""
Minimal account storage: resources saved at ``/storage/`` paths, exposed
read-only through ``/public/`` capability links.

A resource has exactly one owner while it sits in an account's storage and
none once it has been loaded (moved) out.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..errors import StorageError
from .address import FlowAddress

logger = logging.getLogger(__name__)

STORAGE_DOMAIN = "/storage/"
PUBLIC_DOMAIN = "/public/"


class Resource:
    """Base for objects that live in account storage."""

    def __init__(self) -> None:
        self._owner: Optional["Account"] = None

    @property
    def owner(self) -> Optional["Account"]:
        """The account whose storage holds this resource, or None."""
        return self._owner


def _check_path(path: str, domain: str) -> None:
    if not path.startswith(domain) or len(path) == len(domain):
        raise StorageError(f"path must be of the form {domain}<name>: {path!r}")


class Account:
    """A Flow account: an address plus typed storage and public links."""

    def __init__(self, address: Union[FlowAddress, str]) -> None:
        if isinstance(address, str):
            address = FlowAddress.from_string(address)
        self.address = address
        self._storage: Dict[str, Resource] = {}
        self._links: Dict[str, Tuple[str, Callable[[Any], Any]]] = {}

    def __repr__(self) -> str:
        return f"Account({str(self.address)!r})"

    def save(self, resource: Resource, path: str) -> None:
        """Move resource into storage at path."""
        _check_path(path, STORAGE_DOMAIN)
        if path in self._storage:
            raise StorageError(f"{path} is already occupied in {self.address}")
        if resource.owner is not None:
            raise StorageError(f"resource is already stored in {resource.owner.address}")
        self._storage[path] = resource
        resource._owner = self
        logger.debug("Saved %s at %s in %s", type(resource).__name__, path, self.address)

    def load(self, path: str) -> Optional[Resource]:
        """Move the resource at path out of storage; None if the path is empty."""
        _check_path(path, STORAGE_DOMAIN)
        resource = self._storage.pop(path, None)
        if resource is not None:
            resource._owner = None
            logger.debug("Loaded %s from %s in %s", type(resource).__name__, path, self.address)
        return resource

    def borrow(self, path: str) -> Optional[Resource]:
        """Reference to the resource at path without moving it."""
        _check_path(path, STORAGE_DOMAIN)
        return self._storage.get(path)

    def link(self, public_path: str, target_path: str, view: Callable[[Any], Any]) -> None:
        """Publish ``view(resource)`` for the resource at target_path."""
        _check_path(public_path, PUBLIC_DOMAIN)
        _check_path(target_path, STORAGE_DOMAIN)
        if public_path in self._links:
            raise StorageError(f"{public_path} is already linked in {self.address}")
        self._links[public_path] = (target_path, view)
        logger.debug("Linked %s -> %s in %s", public_path, target_path, self.address)

    def unlink(self, public_path: str) -> None:
        _check_path(public_path, PUBLIC_DOMAIN)
        self._links.pop(public_path, None)

    def capability(self, public_path: str) -> Optional[Any]:
        """The published view at public_path, or None if unlinked or dangling."""
        _check_path(public_path, PUBLIC_DOMAIN)
        link = self._links.get(public_path)
        if link is None:
            return None
        target_path, view = link
        resource = self._storage.get(target_path)
        if resource is None:
            return None
        return view(resource)


__all__: tuple[str, ...] = ("Account", "Resource")
