"""
Base exporter interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, TYPE_CHECKING

from auto_adjust.gateway import RenderGateway

if TYPE_CHECKING:
    from auto_adjust.group import AutoAdjustmentsGroup


class BaseExporter(ABC):
    """
    Abstract base class for group exporters.

    Config-only constructor - reads from config['auto_adjust']['export'].
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize exporter with configuration.

        Args:
            config: Full configuration dictionary
        """
        self._config = config
        exp = config.get('auto_adjust', {}).get('export', {})

        self._organize_by_cluster = exp.get('organize_by_cluster', True)
        self._include_thumbnails = exp.get('include_thumbnails', False)
        self._thumbnail_size = int(exp.get('thumbnail_size', 512))
        self._extension = exp.get('extension', '.jpg')

    @abstractmethod
    async def export(
        self,
        group: "AutoAdjustmentsGroup",
        renderer: RenderGateway,
        output_path: Path
    ) -> Path:
        """
        Render every completed entry of a group and write the results.

        Entries that are not completed (including failed ones) are skipped
        and listed in the export metadata.

        Args:
            group: Processed group
            renderer: Render gateway owned by the caller
            output_path: Where to export

        Returns:
            Path to exported output
        """
        pass
