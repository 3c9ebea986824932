"""Tests for the document session."""

from config import RenderOptions
from session import DocumentSession
from tests.conftest import BASIC_SVG, GROUP_SVG, RecordingCanvas


def test_new_session_has_nothing_to_draw():
    session = DocumentSession()
    assert session.document is None
    assert not session.dirty
    assert session.render_frame(RecordingCanvas) is None
    assert session.debug_lines() == []


def test_load_marks_dirty_and_sets_size():
    session = DocumentSession()
    result = session.load_markup(BASIC_SVG)
    assert result.ok
    assert session.dirty
    assert session.surface_size == (200, 100)


def test_frames_only_render_when_dirty():
    session = DocumentSession()
    session.load_markup(BASIC_SVG)

    canvas = session.render_frame(RecordingCanvas)
    assert isinstance(canvas, RecordingCanvas)
    assert (canvas.width, canvas.height) == (200, 100)
    assert 'fill_rect' in canvas.names()
    assert not session.dirty
    assert session.frames_rendered == 1

    assert session.render_frame(RecordingCanvas) is None
    assert session.frames_rendered == 1


def test_invalidate_forces_a_frame():
    session = DocumentSession()
    session.load_markup(BASIC_SVG)
    session.render_frame(RecordingCanvas)
    session.invalidate()
    assert session.render_frame(RecordingCanvas) is not None
    assert session.frames_rendered == 2


def test_resize():
    session = DocumentSession()
    session.load_markup(BASIC_SVG)
    session.render_frame(RecordingCanvas)

    assert not session.resize(200, 100)
    assert not session.dirty

    assert session.resize(400, 200)
    assert session.dirty
    canvas = session.render_frame(RecordingCanvas)
    assert (canvas.width, canvas.height) == (400, 200)


def test_later_loads_keep_surface_size():
    session = DocumentSession()
    session.load_markup(BASIC_SVG)
    session.load_markup(GROUP_SVG)
    assert session.surface_size == (200, 100)
    assert session.document.width == 100


def test_failed_load_keeps_previous_document():
    session = DocumentSession()
    session.load_markup(BASIC_SVG)
    previous = session.document
    session.render_frame(RecordingCanvas)

    result = session.load_markup("<svg><g></svg>")
    assert not result.ok
    assert session.document is previous
    assert not session.dirty


def test_debug_lines():
    session = DocumentSession(RenderOptions(default_size=10))
    session.load_markup('<svg><rect width="1" height="2"/></svg>')
    assert session.debug_lines() == ["Root: width=10, height=10", "Rect: x=0, y=0, width=1, height=2"]
    assert session.surface_size == (10, 10)
