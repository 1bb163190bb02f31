import logging
from pathlib import Path

from .manifest import ProjectManifest

logger = logging.getLogger(__name__)

BLUEPRINT_PATTERNS = ("*.bp", "*.bps")


def discover_blueprint_files(root: Path, manifest: ProjectManifest) -> list[Path]:
    files: list[Path] = []
    for rel in manifest.module_paths:
        base = (root / rel).resolve()
        if not base.exists():
            logger.debug("Module path %s does not exist, skipping", base)
            continue
        for pattern in BLUEPRINT_PATTERNS:
            for p in base.rglob(pattern):
                files.append(p)
    return sorted(set(files))
