"""Route parser for browse-style storage addresses.

Splits a raw route into its filesystem and intra-filesystem path:
- "" or "/" -> root listing (every filesystem)
- "/fs" -> filesystem "fs", path ROOT_DIR
- "/fs/a/b.txt" -> filesystem "fs", path "a/b.txt"

No percent-decoding or ".." normalization happens here; resolving the path
inside a filesystem is the storage engine's job.
"""

from dataclasses import dataclass
from enum import Enum

ROOT_DIR = "/"


class RouteKind(Enum):
    """Kind of a parsed browse route."""

    ROOT_LISTING = "root_listing"
    FILESYSTEM_PATH = "filesystem_path"


@dataclass(frozen=True)
class ParsedRoute:
    """A parsed browse route.

    ``filesystem`` and ``path`` are None for the root listing.
    """

    kind: RouteKind
    filesystem: str | None = None
    path: str | None = None

    @property
    def is_root_listing(self) -> bool:
        return self.kind is RouteKind.ROOT_LISTING

    def components(self) -> tuple[str, str]:
        """Return the (filesystem, path) pair.

        Raises:
            ValueError: If called on the root listing, which has no components.
        """
        if self.filesystem is None or self.path is None:
            raise ValueError("Root listing route has no filesystem/path components")
        return self.filesystem, self.path


ROOT_LISTING = ParsedRoute(kind=RouteKind.ROOT_LISTING)


def parse_route(raw_route: str) -> ParsedRoute:
    """Parse a raw browse route into a ParsedRoute.

    Exactly one leading "/" is trimmed, then the remainder is split on the
    first "/" only, so deeper slashes stay part of the path.

    Args:
        raw_route: Route captured after the browse prefix, e.g. "/fs/a/b".

    Returns:
        ROOT_LISTING for a blank route, otherwise a FILESYSTEM_PATH route.

    Examples:
        "" -> ROOT_LISTING
        "/" -> ROOT_LISTING
        "/maven" -> ParsedRoute(FILESYSTEM_PATH, "maven", "/")
        "/maven/org/foo.pom" -> ParsedRoute(FILESYSTEM_PATH, "maven", "org/foo.pom")
    """
    if not raw_route.strip():
        return ROOT_LISTING

    remainder = raw_route[1:] if raw_route.startswith("/") else raw_route
    if not remainder:
        return ROOT_LISTING

    filesystem, sep, path = remainder.partition("/")
    return ParsedRoute(
        kind=RouteKind.FILESYSTEM_PATH,
        filesystem=filesystem,
        path=path if sep else ROOT_DIR,
    )
