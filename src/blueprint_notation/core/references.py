"""
File reference resolution.

A declaration like ``DataStructure User found in `models/user.bp``` points to
another BluePrint file. References are resolved lazily: parsing never touches
the filesystem, ``ReferenceResolver`` loads referenced files on demand.
"""

import logging
from pathlib import Path

from . import ir
from .errors import make_link_error
from .options import ParserOptions
from .parser import parse_file

logger = logging.getLogger(__name__)


def candidate_paths(
    reference: ir.FileReference,
    origin: Path | None,
    base_dir: Path | None,
) -> list[Path]:
    """
    Paths a reference may point to, in lookup order.

    Relative paths are tried next to the referencing document first, then
    under ``base_dir``. Absolute paths are used as written.
    """
    target = Path(reference.path)
    if target.is_absolute():
        return [target]

    candidates: list[Path] = []
    if origin is not None:
        candidates.append(origin.parent / target)
    if base_dir is not None:
        candidates.append(base_dir / target)
    if not candidates:
        candidates.append(target)
    return candidates


def _origin_of(document: ir.Document) -> Path | None:
    if document.file == "<string>":
        return None
    return Path(document.file)


class ReferenceResolver:
    """
    Loads the documents behind file references.

    Each file is parsed at most once per resolver; results are cached by
    resolved path.
    """

    def __init__(self, base_dir: Path | None = None, options: ParserOptions | None = None):
        self.base_dir = base_dir
        self.options = options
        self._cache: dict[Path, ir.Document] = {}

    def locate(self, reference: ir.FileReference, origin: Path | None = None) -> Path:
        """
        Find the file a reference points to.

        Raises:
            LinkError: If no candidate path exists
        """
        candidates = candidate_paths(reference, origin, self.base_dir)
        for path in candidates:
            if path.is_file():
                return path.resolve()

        tried = ", ".join(str(p) for p in candidates)
        raise make_link_error(
            f"File reference '{reference.name}' not found: {reference.path} (tried {tried})",
            reference.location,
        )

    def resolve(self, reference: ir.FileReference, origin: Path | None = None) -> ir.Document:
        """
        Parse the file behind ``reference``.

        Args:
            reference: Reference to resolve
            origin: Path of the document containing the reference

        Returns:
            The referenced Document (cached)

        Raises:
            LinkError: If the file does not exist
            ParseError: If the referenced file is not valid BluePrint
        """
        path = self.locate(reference, origin)
        cached = self._cache.get(path)
        if cached is not None:
            return cached

        logger.debug("Resolving %s -> %s", reference.name, path)
        document = parse_file(path, self.options)
        self._cache[path] = document
        return document

    def resolve_all(self, document: ir.Document) -> dict[str, ir.Document]:
        """
        Resolve every reference reachable from ``document``.

        References inside referenced files are followed too. The result maps
        reference names to documents; when a name repeats, the first
        resolution wins.

        Raises:
            LinkError: On a missing file or a circular chain of references
        """
        resolved: dict[str, ir.Document] = {}
        origin = _origin_of(document)
        chain = [origin.resolve()] if origin is not None else []
        self._walk(document, origin, chain, resolved, done=set())
        logger.debug("Resolved %d reference(s) from %s", len(resolved), document.file)
        return resolved

    def _walk(
        self,
        document: ir.Document,
        origin: Path | None,
        chain: list[Path],
        resolved: dict[str, ir.Document],
        done: set[Path],
    ) -> None:
        for reference in ir.iter_references(document):
            path = self.locate(reference, origin)
            if path in chain:
                cycle = " -> ".join(p.name for p in [*chain[chain.index(path) :], path])
                raise make_link_error(f"Circular file reference: {cycle}", reference.location)

            target = self.resolve(reference, origin)
            resolved.setdefault(reference.name, target)
            if path in done:
                continue
            self._walk(target, path, [*chain, path], resolved, done)
            done.add(path)
