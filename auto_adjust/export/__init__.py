"""
Export of rendered photos for a processed group.
"""

from auto_adjust.export.base import BaseExporter
from auto_adjust.export.folder import FolderExporter
from auto_adjust.export.zip import ZipExporter

__all__ = ['BaseExporter', 'FolderExporter', 'ZipExporter', 'create_exporter']


def create_exporter(config: dict) -> BaseExporter:
    """
    Create exporter based on configuration.

    Args:
        config: Full configuration dictionary

    Returns:
        Configured exporter instance
    """
    format_type = config.get('auto_adjust', {}).get('export', {}).get('format', 'folder')

    exporters = {
        'folder': FolderExporter,
        'zip': ZipExporter,
    }

    exporter_class = exporters.get(format_type, FolderExporter)
    return exporter_class(config)
