"""Tests for CLI module."""

import argparse
import json
import os

import pytest
from PIL import Image

from rewind.cli import build_parser, load_settings, main, parse_overrides, parse_resolution


class TestParser:
    def test_parser_builds(self):
        assert build_parser() is not None

    def test_still_args(self):
        args = build_parser().parse_args(["still", "in.png", "-o", "out.png", "-t", "2.5",
                                          "--set", "zigZag=6", "--set", "pixelate=3"])
        assert args.command == "still"
        assert args.input == "in.png"
        assert args.time == 2.5
        assert args.overrides == ["zigZag=6", "pixelate=3"]
        assert args.max_size == 1000

    def test_gif_args(self):
        args = build_parser().parse_args(["gif", "in.png", "-o", "out.gif", "--frames", "12",
                                          "--delay", "40", "-seed", "7"])
        assert args.frames == 12
        assert args.delay == 40.0
        assert args.seed == 7

    def test_video_args(self):
        args = build_parser().parse_args(["video", "in.png", "-o", "out.mp4", "--no-loop",
                                          "--resolution", "320x240", "--fit", "cover"])
        assert args.no_loop
        assert args.resolution == (320, 240)
        assert args.fit == "cover"

    def test_preview_output_optional(self):
        args = build_parser().parse_args(["preview", "in.png", "-n", "5"])
        assert args.output is None
        assert args.count == 5


class TestOverrides:
    def test_parse(self):
        assert parse_overrides(["zigZag=6", "seed=3", "brightness=1.5", "seed=none"]) == {
            "zig_zag": 6, "seed": None, "brightness": 1.5,
        }

    def test_missing_equals(self):
        with pytest.raises(ValueError):
            parse_overrides(["zigZag"])

    def test_resolution(self):
        assert parse_resolution("640X480") == (640, 480)
        with pytest.raises(argparse.ArgumentTypeError):
            parse_resolution("640")
        with pytest.raises(argparse.ArgumentTypeError):
            parse_resolution("0x10")

    def test_load_settings_layers(self, tmp_path):
        path = str(tmp_path / "s.json")
        with open(path, "w") as f:
            json.dump({"zigZag": 1.0, "pixelate": 2.0}, f)
        args = argparse.Namespace(settings=path, overrides=["pixelate=5"], seed=4,
                                  frames=8, cycle=None, delay=None)
        settings = load_settings(args)
        assert settings.zig_zag == 1.0
        assert settings.pixelate == 5
        assert settings.seed == 4
        assert settings.frame_count == 8

    def test_load_settings_unknown(self):
        args = argparse.Namespace(settings=None, overrides=["sparkle=1"])
        with pytest.raises(ValueError):
            load_settings(args)


class TestMain:
    def test_no_command(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 1

    def test_still(self, image_file, tmp_path, capsys):
        out = str(tmp_path / "still.png")
        main(["still", image_file, "-o", out, "-seed", "1", "--set", "brightness=2"])
        with Image.open(out) as img:
            assert img.size == (40, 30)
        assert "still.png" in capsys.readouterr().out

    def test_still_resolution(self, image_file, tmp_path):
        out = str(tmp_path / "still.png")
        main(["still", image_file, "-o", out, "--resolution", "20x20", "--fit", "cover"])
        with Image.open(out) as img:
            assert img.size == (20, 20)

    def test_gif(self, image_file, tmp_path):
        out = str(tmp_path / "loop.gif")
        main(["gif", image_file, "-o", out, "--frames", "3", "-seed", "2"])
        with Image.open(out) as img:
            assert img.n_frames == 3

    def test_preview_saves_last_frame(self, image_file, tmp_path, capsys):
        out = str(tmp_path / "last.png")
        main(["preview", image_file, "-n", "2", "--fps", "0", "-o", out])
        assert os.path.exists(out)
        assert "Previewed 2 frames" in capsys.readouterr().out

    def test_settings_command(self, tmp_path):
        out = str(tmp_path / "settings.json")
        main(["settings", "-o", out, "--set", "zigZag=6", "--frames", "10"])
        with open(out) as f:
            d = json.load(f)
        assert d["zig_zag"] == 6.0
        assert d["frame_count"] == 10
        assert d["flow_speed"] == 1.6
