"""Tests for host ports: text appending, clipboard listener and editor tracker."""

import pytest

from scratch_organizer.core.ports import ClipboardListener, OpenEditorTracker, add_text
from scratch_organizer.domain.value_objects import AppendType, Scratch
from scratch_organizer.exceptions import InvariantViolation


class TestAddText:
    """Test add_text."""

    def test_append_adds_newline_first(self):
        assert add_text("line", "clip", AppendType.APPEND) == "line\nclip"

    def test_append_after_trailing_newline(self):
        assert add_text("line\n", "clip", AppendType.APPEND) == "line\nclip"

    def test_append_to_empty(self):
        assert add_text("", "clip", AppendType.APPEND) == "clip"

    def test_prepend(self):
        assert add_text("line", "clip", AppendType.PREPEND) == "clip\nline"

    def test_unknown_append_type(self):
        with pytest.raises(InvariantViolation):
            add_text("line", "clip", None)


class TestClipboardListener:
    """Test ClipboardListener."""

    @pytest.fixture
    def listener(self, manager, scratches_dir):
        (scratches_dir / "a.txt").write_text("first")
        manager.sync_scratches_with_file_system()
        return ClipboardListener(manager)

    def test_ignored_when_not_listening(self, listener, ide):
        assert not listener.on_clipboard_changed(None, "copied")
        assert ide.added_text == []

    def test_appends_when_listening(self, listener, manager, ide, scratches_dir):
        manager.user_wants_to_listen_to_clipboard(True)

        assert listener.on_clipboard_changed("old", "copied")
        assert ide.added_text == [(Scratch.create("a.txt"), "copied", AppendType.APPEND)]
        assert (scratches_dir / "a.txt").read_text() == "first\ncopied"

    def test_unchanged_or_empty_clipboard_is_ignored(self, listener, manager, ide):
        manager.user_wants_to_listen_to_clipboard(True)

        assert not listener.on_clipboard_changed("same", "same")
        assert not listener.on_clipboard_changed("old", None)
        assert ide.added_text == []

    def test_failures_are_skipped(self, listener, manager, scratches_dir):
        manager.user_wants_to_listen_to_clipboard(True)
        (scratches_dir / "a.txt").unlink()

        assert not listener.on_clipboard_changed(None, "copied")


class TestOpenEditorTracker:
    """Test OpenEditorTracker."""

    @pytest.fixture
    def tracker(self, manager, scratches_dir):
        (scratches_dir / "a.txt").write_text("")
        (scratches_dir / "b.txt").write_text("")
        manager.sync_scratches_with_file_system()
        return OpenEditorTracker(manager)

    def test_selection_in_open_project_updates_last_opened(self, tracker, manager, scratches_dir):
        tracker.project_opened("project-1")
        tracker.selection_changed("project-1", scratches_dir / "b.txt")

        assert manager.config.last_opened_scratch == Scratch.create("b.txt")

    def test_unknown_project_is_ignored(self, tracker, manager, scratches_dir):
        tracker.selection_changed("project-1", scratches_dir / "b.txt")
        assert manager.config.last_opened_scratch is None

    def test_non_scratch_file_is_ignored(self, tracker, manager, tmp_path):
        (tmp_path / "other.txt").write_text("")
        tracker.project_opened("project-1")
        tracker.selection_changed("project-1", tmp_path / "other.txt")
        tracker.selection_changed("project-1", None)

        assert manager.config.last_opened_scratch is None

    def test_closed_project_is_deregistered(self, tracker, manager, scratches_dir):
        tracker.project_opened("project-1")
        tracker.project_opened("project-2")
        tracker.project_closed("project-1")

        assert tracker.tracked_projects == ("project-2",)
        tracker.selection_changed("project-1", scratches_dir / "a.txt")
        assert manager.config.last_opened_scratch is None

    def test_stop_tracking(self, tracker):
        tracker.project_opened("project-1")
        tracker.stop_tracking()
        assert tracker.tracked_projects == ()
