"""
ZIP archive exporter.
"""

import logging
import tempfile
import zipfile
from pathlib import Path

from auto_adjust.export.base import BaseExporter
from auto_adjust.export.folder import FolderExporter
from auto_adjust.gateway import RenderGateway

logger = logging.getLogger(__name__)


class ZipExporter(BaseExporter):
    """
    Exports rendered photos as ZIP archive.

    Uses FolderExporter internally, then zips the result.
    """

    async def export(self, group, renderer: RenderGateway, output_path: Path) -> Path:
        """
        Export rendered photos as ZIP archive.

        Args:
            group: Processed group
            renderer: Render gateway
            output_path: Output ZIP file path (or directory)

        Returns:
            Path to created ZIP file
        """
        output_path = Path(output_path)

        if output_path.is_dir():
            zip_path = output_path / f"group_{group.group_id}.zip"
        else:
            zip_path = output_path.with_suffix('.zip')
            zip_path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.TemporaryDirectory() as tmpdir:
            temp_dir = Path(tmpdir)

            folder_exporter = FolderExporter(self._config)
            await folder_exporter.export(group, renderer, temp_dir)

            self._create_zip(temp_dir, zip_path)

        logger.info(f"Exported group {group.group_id} to {zip_path}")
        return zip_path

    def _create_zip(self, source_dir: Path, zip_path: Path):
        """Create ZIP archive from directory."""
        with zipfile.ZipFile(zip_path, 'w', zipfile.ZIP_DEFLATED) as zf:
            for file_path in source_dir.rglob('*'):
                if file_path.is_file():
                    arcname = file_path.relative_to(source_dir)
                    zf.write(file_path, arcname)
