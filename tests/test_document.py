"""Tests for document construction and loading."""

import pytest

from document import DEFAULT_SIZE, Document, load_document, parse_viewbox
from tests.conftest import BASIC_SVG, GROUP_SVG, RecordingCanvas


def test_size_and_missing_viewbox():
    document = Document.from_markup(BASIC_SVG)
    assert document.width == 200
    assert document.height == 100
    assert document.viewbox == (0, 0, 200, 100)
    assert document.scale_factors(200, 100) == (1, 1)


def test_viewbox_scaling():
    document = Document.from_markup(GROUP_SVG)
    assert document.viewbox == (0, 0, 50, 50)
    assert document.scale_factors(100, 100) == (2, 2)
    assert document.scale_factors(50, 100) == (1, 2)


def test_missing_size_uses_default():
    document = Document.from_markup('<svg></svg>')
    assert document.width == DEFAULT_SIZE
    assert document.height == DEFAULT_SIZE
    assert document.viewbox == (0, 0, DEFAULT_SIZE, DEFAULT_SIZE)


@pytest.mark.parametrize("width", ['0', '-10', 'auto', '100%'])
def test_unusable_size_uses_default(width):
    document = Document.from_markup(f'<svg width="{width}" height="50"></svg>')
    assert document.width == DEFAULT_SIZE
    assert document.height == 50


def test_custom_default_size():
    document = Document.from_markup('<svg></svg>', default_size=64)
    assert (document.width, document.height) == (64, 64)


@pytest.mark.parametrize("value", [None, '', '0 0 10', '0 0 0 10', '0 0 10 -5', 'a b c d',
                                   '0 0 abc 100 100', '0 0 10px 10'])
def test_unusable_viewbox_falls_back(value):
    assert parse_viewbox(value, 30, 40) == (0, 0, 30, 40)


def test_viewbox_with_commas():
    assert parse_viewbox('-5,-5, 10,20', 30, 40) == (-5, -5, 10, 20)


def test_viewbox_transform_moves_origin():
    document = Document.from_markup('<svg width="100" height="100" viewBox="10 10 50 50"></svg>')
    matrix = document.viewbox_transform(100, 100)
    assert matrix.transform_point(10, 10) == pytest.approx((0, 0))
    assert matrix.transform_point(60, 60) == pytest.approx((100, 100))


def test_root_attributes_are_inherited():
    document = Document.from_markup('<svg fill="none" stroke="red"><circle r="2"/></svg>')
    circle = document.root.children[0]
    assert circle.style.fill is None
    assert circle.style.stroke == 'red'


def test_draw_balances_state_and_applies_viewbox():
    document = Document.from_markup(GROUP_SVG)
    canvas = RecordingCanvas(100, 100)
    document.draw(canvas)

    assert canvas.calls[0] == ('push_state',)
    assert canvas.calls[-1] == ('pop_state',)
    assert canvas.depth == 0
    # viewBox scale 2, then translate(10,0) scale(2)
    transforms = [c[1] for c in canvas.calls if c[0] == 'set_transform']
    assert transforms[0] == (4.0, 0.0, 0.0, 4.0, 20.0, 0.0)


def test_draw_uses_canvas_size():
    document = Document.from_markup(GROUP_SVG)
    canvas = RecordingCanvas(50, 50)
    document.draw(canvas)
    transforms = [c[1] for c in canvas.calls if c[0] == 'set_transform']
    assert transforms[0] == (2.0, 0.0, 0.0, 2.0, 10.0, 0.0)


def test_group_children_skip_unknown_tags():
    document = Document.from_markup(GROUP_SVG)
    group = document.root.children[0]
    assert len(group.children) == 3


def test_debug_info():
    document = Document.from_markup(BASIC_SVG)
    assert document.collect_debug_info() == [
        "Root: width=200, height=100",
        "Rect: x=10, y=10, width=80, height=40",
        "Circle: cx=150, cy=50, r=20",
        "Path(3): M10 90 L190 90 Z",
    ]


def test_debug_info_includes_viewbox():
    lines = Document.from_markup(GROUP_SVG).collect_debug_info()
    assert lines[:2] == ["Root: width=100, height=100", 'viewBox="0 0 50 50"']


def test_load_document_success():
    result = load_document(BASIC_SVG)
    assert result.ok
    assert result.error is None
    assert result.document.width == 200


@pytest.mark.parametrize("markup", ["", "<svg><g></svg>", "<html/>"])
def test_load_document_failure(markup):
    result = load_document(markup)
    assert not result.ok
    assert result.document is None
    assert result.error
