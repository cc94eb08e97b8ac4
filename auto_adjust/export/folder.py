"""
Folder-based exporter.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Set

from auto_adjust.domain import EntryStatus
from auto_adjust.export.base import BaseExporter
from auto_adjust.gateway import RenderGateway

logger = logging.getLogger(__name__)


def safe_name(entry_id: str) -> str:
    """File-system friendly version of an entry id."""
    return entry_id.replace('/', '_').replace('\\', '_')


class FolderExporter(BaseExporter):
    """
    Exports rendered photos to a folder structure.

    Can organize by cluster or flat structure.
    Optionally includes thumbnails.
    """

    async def export(self, group, renderer: RenderGateway, output_path: Path) -> Path:
        """
        Export rendered photos to folder structure.

        Creates:
        - output_path/cluster_N/ and output_path/unclustered/ (if organize_by_cluster=True)
        - output_path/thumbnails/ (if include_thumbnails=True)
        - output_path/metadata.json

        Args:
            group: Processed group
            renderer: Render gateway
            output_path: Output directory

        Returns:
            Path to output directory
        """
        output_path = Path(output_path)
        output_path.mkdir(parents=True, exist_ok=True)

        labels = group.partition().labels
        written: List[Path] = []
        stems: Set[str] = set()
        metadata: Dict[str, Any] = {'group_id': group.group_id, 'entries': {}, 'excluded': {}}

        for entry in group.entries():
            adjustments = group.get_adjustments(entry.id)
            if adjustments is None:
                metadata['excluded'][entry.id] = {
                    'status': entry.status.value,
                    'error': str(entry.last_error) if entry.status is EntryStatus.FAILED else None,
                }
                continue

            cluster_id = labels.get(entry.id)
            target_dir = self._target_dir(output_path, cluster_id)
            target_dir.mkdir(parents=True, exist_ok=True)

            dst = target_dir / f"{self._unique_stem(entry.id, stems)}{self._extension}"
            dst.write_bytes(await renderer.render(entry.source, adjustments))
            written.append(dst)

            metadata['entries'][entry.id] = {
                'file': str(dst.relative_to(output_path)),
                'cluster_id': cluster_id,
                'is_reference': entry.is_reference,
                'adjustments': adjustments.to_dict(),
            }

        if self._include_thumbnails:
            self._create_thumbnails(written, output_path)

        self._export_metadata(metadata, output_path)

        logger.info(
            f"Exported {len(written)} photos to {output_path} "
            f"({len(metadata['excluded'])} excluded)"
        )
        return output_path

    def _unique_stem(self, entry_id: str, taken: Set[str]) -> str:
        """
        File stem for an entry; ``_2``, ``_3``... is appended when two ids share a safe name.

        Stems are unique across the whole export so thumbnails never collide either.
        """
        base = safe_name(entry_id)
        stem, suffix = base, 2
        while stem in taken:
            stem = f"{base}_{suffix}"
            suffix += 1
        taken.add(stem)
        return stem

    def _target_dir(self, output_path: Path, cluster_id) -> Path:
        if not self._organize_by_cluster:
            return output_path
        if cluster_id is None:
            return output_path / "unclustered"
        return output_path / f"cluster_{cluster_id}"

    def _create_thumbnails(self, written: List[Path], output_path: Path):
        """Create thumbnails for exported photos."""
        from PIL import Image, ImageOps

        thumb_dir = output_path / "thumbnails"
        thumb_dir.mkdir(exist_ok=True)

        for src in written:
            dst = thumb_dir / f"{src.stem}.jpg"

            with Image.open(src) as img:
                # Apply EXIF orientation (fixes rotation issues)
                img = ImageOps.exif_transpose(img)
                img.thumbnail((self._thumbnail_size, self._thumbnail_size))
                img.convert('RGB').save(dst, quality=85)

    def _export_metadata(self, metadata: Dict[str, Any], output_path: Path):
        """Export metadata JSON file."""
        meta_file = output_path / "metadata.json"
        with open(meta_file, 'w') as f:
            json.dump(metadata, f, indent=2)
