"""Tests for the overlap-wfc command line."""
import logging

import numpy as np
import pandas as pd
import pytest
from PIL import Image

from overlap_wfc.cli import build_parser, main

COLORS = np.array([[200, 30, 30], [30, 200, 30], [30, 30, 200]], dtype=np.uint8)


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("overlap_wfc")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def stripes_png(tmp_path, stripes):
    path = tmp_path / "stripes.png"
    Image.fromarray(COLORS[stripes]).save(path)
    return path


class TestParser:
    """Argument defaults."""

    def test_defaults(self):
        args = build_parser().parse_args(["in.png"])
        assert args.pattern_size == 3
        assert args.out_size == [48, 48]
        assert args.num_trials == 1
        assert args.max_retries == 10
        assert not args.augment_rot_reflect


class TestMain:
    """End-to-end runs on a small PNG."""

    def test_successful_run(self, stripes_png, tmp_path, capsys):
        out_dir = tmp_path / "out"
        code = main([
            str(stripes_png), "--pattern-size", "2", "--out-size", "4", "6",
            "--seed", "1", "--num-trials", "2", "--output-dir", str(out_dir),
        ])
        assert code == 0
        pngs = sorted(out_dir.glob("*.png"))
        assert len(pngs) == 2
        assert len(list(out_dir.glob("*_collapsed_grid.npz"))) == 2
        img = np.array(Image.open(pngs[0]))
        assert img.shape == (4, 6, 3)
        # every output row is a rotation of the source stripe colors
        assert {tuple(c) for c in img[0]} == {tuple(c) for c in COLORS}
        trials = pd.read_csv(next(out_dir.glob("trials_*.csv")))
        assert trials["status"].tolist() == ["success", "success"]
        assert "WFC success: 2/2" in capsys.readouterr().out

    def test_failed_trials(self, stripes_png, tmp_path, capsys):
        out_dir = tmp_path / "fail"
        code = main([
            str(stripes_png), "--pattern-size", "2", "--out-size", "2", "4",
            "--seed", "0", "--max-retries", "1", "--output-dir", str(out_dir),
        ])
        assert code == 1
        trials = pd.read_csv(next(out_dir.glob("trials_*.csv")))
        assert trials["status"].tolist() == ["fail"]
        assert trials["attempts"].tolist() == [2]
        assert "FAILED" in capsys.readouterr().out

    def test_pattern_too_large(self, stripes_png, tmp_path, capsys):
        code = main([str(stripes_png), "--pattern-size", "4", "--output-dir", str(tmp_path / "x")])
        assert code == 1
        assert "Cannot build patterns" in capsys.readouterr().out

    def test_invalid_config(self, stripes_png, capsys):
        assert main([str(stripes_png), "--pattern-size", "1"]) == 2
        assert "Invalid arguments" in capsys.readouterr().out
