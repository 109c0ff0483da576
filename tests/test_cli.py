"""Smoke tests for the Typer CLI."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from brick_mosaic.cli import app

runner = CliRunner()

CATALOG = """id,name,rgb,hex,plate_1x1,tile_1x1,round_1x1,round_2x2
1,White,"242,243,242",#F2F3F2,+,+,+,+
2,Black,"27,42,52",#1B2A34,+,+,+,+
3,Red,"201,26,9",#C91A09,+,+,-,+
"""


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    p = tmp_path / "palette.csv"
    p.write_text(CATALOG, encoding="utf-8")
    return p


@pytest.fixture
def photo(tmp_path: Path) -> Path:
    p = tmp_path / "photo.png"
    rng = np.random.default_rng(7)
    Image.fromarray(rng.integers(0, 256, (30, 40, 3), dtype=np.uint8)).save(p)
    return p


def test_render_writes_all_outputs(
    catalog_file: Path, photo: Path, tmp_path: Path,
) -> None:
    out = tmp_path / "out" / "mosaic"
    result = runner.invoke(app, [
        "render", str(catalog_file), str(photo), str(out),
        "--tiles", "4", "--layers", "1", "--ldraw", "--parts", "--format", "png",
    ])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "out" / "mosaic.png").exists()
    ldr = (tmp_path / "out" / "mosaic.ldr").read_text().splitlines()
    # 40x30 px at 4 tiles -> 10 px tiles, 4x3 grid
    assert len(ldr) == 4 * 3 * 6
    assert len((tmp_path / "out" / "mosaic.csv").read_text().splitlines()) == 3


def test_render_without_out_name_writes_nothing(
    catalog_file: Path, photo: Path, tmp_path: Path,
) -> None:
    result = runner.invoke(app, [
        "render", str(catalog_file), str(photo), "--tiles", "4", "--layers", "1",
    ])
    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in tmp_path.iterdir()) == ["palette.csv", "photo.png"]


def test_render_missing_image(catalog_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, [
        "render", str(catalog_file), str(tmp_path / "missing.jpg"),
    ])
    assert result.exit_code == 1


def test_render_catalog_without_rounds(photo: Path, tmp_path: Path) -> None:
    p = tmp_path / "flat.csv"
    p.write_text(
        'id,name,rgb,hex,a,b,c,d\n1,White,"242,243,242",#F2F3F2,+,+,-,-\n',
        encoding="utf-8",
    )
    out = tmp_path / "never"
    result = runner.invoke(app, [
        "render", str(p), str(photo), str(out), "--tiles", "4", "--layers", "1",
        "--ldraw",
    ])
    assert result.exit_code == 1
    assert not list(tmp_path.glob("never*"))


def test_render_rejects_bad_slider_value(catalog_file: Path, photo: Path) -> None:
    result = runner.invoke(app, [
        "render", str(catalog_file), str(photo), "--sigma", "5000",
    ])
    assert result.exit_code == 1


def test_render_rejects_unknown_format(
    catalog_file: Path, photo: Path, tmp_path: Path,
) -> None:
    result = runner.invoke(app, [
        "render", str(catalog_file), str(photo), str(tmp_path / "out"),
        "--tiles", "2", "--layers", "1", "--format", "xyz",
    ])
    assert result.exit_code == 1
    assert "Unsupported output format" in result.output
    assert not list(tmp_path.glob("out*"))


def test_catalog_listing(catalog_file: Path) -> None:
    result = runner.invoke(app, ["catalog", str(catalog_file)])
    assert result.exit_code == 0, result.output
    assert "White" in result.output


def test_catalog_listing_flags_missing_shapes(tmp_path: Path) -> None:
    p = tmp_path / "flat.csv"
    p.write_text(
        'id,name,rgb,hex,a,b,c,d\n1,White,"242,243,242",#F2F3F2,+,+,-,-\n',
        encoding="utf-8",
    )
    result = runner.invoke(app, ["catalog", str(p)])
    assert result.exit_code == 1
