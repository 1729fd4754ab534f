"""Loads manifests from files and folders."""

from pathlib import Path
from typing import List, Union
import structlog

from costimator.core.exceptions import DecodeException
from costimator.mappers.manifest_mapper import ManifestBatch, ManifestDecoder

logger = structlog.get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


class ManifestLoader:
    """Loads every YAML file below a path into one ManifestBatch."""

    def __init__(self, decoder: ManifestDecoder):
        self.decoder = decoder
        self.logger = logger.bind(component="manifest_loader")

    def _files(self, path: Path) -> List[Path]:
        if path.is_file():
            return [path]
        return sorted(p for p in path.rglob("*") if p.is_file())

    def load_path(self, path: Union[str, Path]) -> ManifestBatch:
        root = Path(path)
        if not root.exists():
            raise FileNotFoundError(f"Manifests path not found: {root}")

        batch = ManifestBatch()
        for file_path in self._files(root):
            if file_path.suffix not in YAML_SUFFIXES:
                self.logger.debug("Skipping non yaml file", file=str(file_path))
                continue

            self.logger.debug("Loading yaml file", file=str(file_path))
            try:
                batch.extend(self.decoder.decode(file_path.read_bytes()))
            except DecodeException as e:
                e.details.setdefault("file", str(file_path))
                raise

        self.logger.info(
            "Manifests loaded",
            path=str(root),
            workloads=len(batch.workloads),
            scaling_policies=len(batch.scaling_policies),
            volume_claims=len(batch.volume_claims)
        )
        return batch
