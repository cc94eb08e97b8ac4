"""Tests for folder and ZIP export of processed groups."""

import asyncio
import json
import zipfile

import pytest
from PIL import Image

from auto_adjust.export import FolderExporter, ZipExporter, create_exporter
from auto_adjust.export.folder import safe_name
from conftest import FEATURES, ROTATIONS


def export_config(**overrides):
    export = {
        'format': 'folder',
        'organize_by_cluster': True,
        'include_thumbnails': False,
        'thumbnail_size': 16,
        'extension': '.png',
    }
    export.update(overrides)
    return {'auto_adjust': {'export': export}}


@pytest.fixture
def processed_group(make_gateway, scenario_config, run_group):
    async def scenario():
        gateway = make_gateway(features=FEATURES, computed=ROTATIONS, failures={"C"})
        group = await run_group(
            gateway, {"A": "/photos/A.raw", "B": "/photos/B.raw", "C": "/photos/C.raw", "N": None},
            scenario_config, group_id="g1",
        )
        await group.set_adjustments("A", {"exposure": 0.2})
        await group.aclose()
        return group

    return asyncio.run(scenario())


class TestCreateExporter:
    def test_picks_format(self):
        assert isinstance(create_exporter(export_config()), FolderExporter)
        assert isinstance(create_exporter(export_config(format='zip')), ZipExporter)
        assert isinstance(create_exporter({}), FolderExporter)


class TestFolderExporter:
    def test_organized_by_cluster(self, processed_group, renderer, tmp_path):
        out = asyncio.run(FolderExporter(export_config()).export(processed_group, renderer, tmp_path / "out"))

        assert (out / "cluster_0" / "A.png").exists()
        assert (out / "cluster_0" / "B.png").exists()
        # N produced no features and is not in any cluster
        assert (out / "unclustered" / "N.png").exists()
        assert not list(out.rglob("C.png"))
        assert [source for source, _ in renderer.rendered] == ["/photos/A.raw", "/photos/B.raw", None]

    def test_metadata(self, processed_group, renderer, tmp_path):
        out = asyncio.run(FolderExporter(export_config()).export(processed_group, renderer, tmp_path))
        metadata = json.loads((out / "metadata.json").read_text())

        assert metadata['group_id'] == "g1"
        assert metadata['entries']['A'] == {
            'file': "cluster_0/A.png",
            'cluster_id': 0,
            'is_reference': False,
            'adjustments': {'exposure': 0.2, 'rotation': 1.0},
        }
        assert metadata['entries']['N']['cluster_id'] is None
        assert metadata['excluded']['C']['status'] == "failed"
        assert "C" in metadata['excluded']['C']['error']

    def test_flat_layout_with_thumbnails(self, processed_group, renderer, tmp_path):
        config = export_config(organize_by_cluster=False, include_thumbnails=True)
        out = asyncio.run(FolderExporter(config).export(processed_group, renderer, tmp_path))

        assert sorted(p.name for p in out.glob("*.png")) == ["A.png", "B.png", "N.png"]
        thumbs = sorted((out / "thumbnails").glob("*.jpg"))
        assert [p.stem for p in thumbs] == ["A", "B", "N"]
        with Image.open(thumbs[0]) as img:
            assert max(img.size) <= 16

    def test_ids_sharing_a_safe_name_get_distinct_files(self, make_gateway, scenario_config, run_group, renderer, tmp_path):
        async def scenario():
            group = await run_group(make_gateway(), ["a/b", "a_b", "a_b_2"], scenario_config)
            await group.aclose()
            config = export_config(organize_by_cluster=False, include_thumbnails=True)
            return await FolderExporter(config).export(group, renderer, tmp_path)

        out = asyncio.run(scenario())
        metadata = json.loads((out / "metadata.json").read_text())

        assert len(renderer.rendered) == 3
        assert {e: m['file'] for e, m in metadata['entries'].items()} == {
            "a/b": "a_b.png",
            "a_b": "a_b_2.png",
            "a_b_2": "a_b_2_2.png",
        }
        assert sorted(p.name for p in out.glob("*.png")) == ["a_b.png", "a_b_2.png", "a_b_2_2.png"]
        assert len(list((out / "thumbnails").glob("*.jpg"))) == 3

    def test_safe_name(self):
        assert safe_name("2024/trip\\IMG_1") == "2024_trip_IMG_1"


class TestZipExporter:
    def test_zip_into_directory(self, processed_group, renderer, tmp_path):
        zip_path = asyncio.run(ZipExporter(export_config()).export(processed_group, renderer, tmp_path))

        assert zip_path == tmp_path / "group_g1.zip"
        with zipfile.ZipFile(zip_path) as zf:
            names = set(zf.namelist())
        assert "metadata.json" in names
        assert "cluster_0/A.png" in names

    def test_zip_to_file_path(self, processed_group, renderer, tmp_path):
        target = tmp_path / "exports" / "batch.out"
        zip_path = asyncio.run(ZipExporter(export_config()).export(processed_group, renderer, target))
        assert zip_path == tmp_path / "exports" / "batch.zip"
        assert zip_path.exists()
