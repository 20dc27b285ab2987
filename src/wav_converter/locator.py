"""Resolve raw object references into concrete storage addresses."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlsplit

from wav_converter.errors import InvalidReferenceError
from wav_converter.types import AddressMode


@dataclass(frozen=True)
class ContainerAddress:
    """Object addressed by container and object name on the default endpoint."""

    container: str
    name: str

    @property
    def mode(self) -> AddressMode:
        return "container"

    def __str__(self) -> str:
        return f"{self.container}/{self.name}"


@dataclass(frozen=True)
class AbsoluteAddress:
    """Object addressed by a fully qualified URL, used verbatim.

    ``location`` is set when the address was placed on another address's
    endpoint; it is then the authoritative container and name, and ``url``
    is only its display form.
    """

    url: str
    location: ContainerAddress | None = field(default=None, compare=False)

    @property
    def mode(self) -> AddressMode:
        return "absolute"

    @property
    def endpoint(self) -> str:
        """Return ``scheme://host`` of the address."""
        parts = urlsplit(self.url)
        return f"{parts.scheme}://{parts.netloc}"

    def __str__(self) -> str:
        return self.url


type ResolvedObjectAddress = ContainerAddress | AbsoluteAddress


def is_absolute_url(reference: str) -> bool:
    """Return whether ``reference`` carries both a scheme and a host."""
    try:
        parts = urlsplit(reference)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def split_container_path(reference: str) -> ContainerAddress:
    """Split ``container/name`` at the first separator.

    Raises
    ------
    InvalidReferenceError
        If the reference has no separator or either side is empty.
    """
    container, sep, name = reference.partition("/")
    if not sep:
        raise InvalidReferenceError(
            f"reference '{reference}' must be 'container/name' or an absolute URL"
        )
    if not container or not name:
        raise InvalidReferenceError(
            f"reference '{reference}' has an empty container or object name"
        )
    return ContainerAddress(container=container, name=name)


def resolve(reference: str) -> ResolvedObjectAddress:
    """Resolve a source or destination reference.

    Parameters
    ----------
    reference : str
        ``container/name`` path or absolute object URL.

    Returns
    -------
    ResolvedObjectAddress
        ``AbsoluteAddress`` for URLs with scheme and host, otherwise a
        ``ContainerAddress``.
    """
    if not reference:
        raise InvalidReferenceError("reference must not be empty")
    if is_absolute_url(reference):
        return AbsoluteAddress(url=reference)
    return split_container_path(reference)


def resolve_destination(
    reference: str,
    source: ResolvedObjectAddress,
) -> ResolvedObjectAddress:
    """Resolve a destination reference relative to an already resolved source.

    A relative destination paired with an absolute source is placed on the
    source's endpoint: ``https://host/in/a.mp3`` + ``out/a.wav`` becomes
    ``https://host/out/a.wav``.
    """
    resolved = resolve(reference)
    if isinstance(resolved, AbsoluteAddress) or not isinstance(source, AbsoluteAddress):
        return resolved
    return AbsoluteAddress(url=f"{source.endpoint}/{resolved}", location=resolved)


def split_absolute(address: AbsoluteAddress) -> tuple[str, ContainerAddress]:
    """Split an absolute URL into its endpoint and path-style container/name.

    Raises
    ------
    InvalidReferenceError
        If the URL path does not name both a container and an object.
    """
    if address.location is not None:
        return address.endpoint, address.location
    parts = urlsplit(address.url)
    path = parts.path.lstrip("/")
    try:
        location = split_container_path(path)
    except InvalidReferenceError as exc:
        raise InvalidReferenceError(
            f"URL '{address.url}' must have the form scheme://host/container/name"
        ) from exc
    return address.endpoint, location
