"""Tests for the command line entry point."""

import os

import pytest
from PIL import Image

from main import UsageError, main, parse_arguments, process_svg_file
from tests.conftest import SOLID_SQUARE_SVG


@pytest.fixture
def svg_file(tmp_path):
    path = tmp_path / "square.svg"
    path.write_text(SOLID_SQUARE_SVG, encoding='utf-8')
    return path


def test_parse_arguments():
    settings = parse_arguments(["a.svg", "-w", "100", "-h", "50", "-aa", "-b", "0, 0,300", "-v"])
    options = settings['options']
    assert settings['files'] == ["a.svg"]
    assert settings['verbose']
    assert (options.width, options.height) == (100, 50)
    assert options.anti_aliasing
    assert options.background == (0, 0, 255)


def test_parse_arguments_defaults():
    settings = parse_arguments(["a.svg", "b.svg"])
    assert settings['files'] == ["a.svg", "b.svg"]
    assert settings['output'] is None
    assert not settings['skip_render']
    assert not settings['debug']
    assert settings['options'].width is None
    assert not settings['options'].anti_aliasing


def test_anti_aliasing_value():
    assert not parse_arguments(["-aa", "off", "a.svg"])['options'].anti_aliasing
    assert parse_arguments(["-aa", "a.svg"])['options'].anti_aliasing


@pytest.mark.parametrize("args", [
    [],
    ["-v"],
    ["a.svg", "--nope"],
    ["a.svg", "-w"],
    ["a.svg", "-w", "0"],
    ["a.svg", "-h", "tall"],
    ["a.svg", "-b", "1,2"],
    ["a.svg", "-aa", "maybe"],
])
def test_parse_arguments_errors(args):
    with pytest.raises(UsageError):
        parse_arguments(args)


def test_main_without_arguments_prints_usage(capsys):
    assert main([]) == 0
    assert "Usage:" in capsys.readouterr().out


def test_main_usage_error(capsys):
    assert main(["--nope"]) == 2
    assert "Unknown option" in capsys.readouterr().out


def test_main_renders_png(svg_file, tmp_path, capsys):
    output = tmp_path / "out.png"
    assert main([str(svg_file), "-o", str(output)]) == 0
    assert output.exists()
    with Image.open(output) as image:
        assert image.size == (20, 20)
    assert "Processed 1/1 file(s) successfully" in capsys.readouterr().out


def test_main_output_directory(svg_file, tmp_path):
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    assert main([str(svg_file), "-o", str(out_dir), "-w", "40"]) == 0
    with Image.open(out_dir / "square.png") as image:
        assert image.size == (40, 20)


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.svg")]) == 1
    assert "File not found" in capsys.readouterr().out


def test_skip_render_with_debug(svg_file, tmp_path, capsys):
    assert process_svg_file(str(svg_file), skip_render=True, debug=True)
    out = capsys.readouterr().out
    assert "Root: width=20, height=20" in out
    assert "Rect: x=5, y=5, width=10, height=10" in out
    assert "(rendering skipped)" in out
    assert not os.path.exists(tmp_path / "square.png")


def test_invalid_markup_fails(tmp_path, capsys):
    path = tmp_path / "bad.svg"
    path.write_text("<svg><g></svg>", encoding='utf-8')
    assert not process_svg_file(str(path), str(tmp_path / "bad.png"))
    assert "Error" in capsys.readouterr().out
    assert not (tmp_path / "bad.png").exists()
