"""
Unit tests for session workspaces and artifact location.
"""

import pytest

from slidereel.capture.locator import DirectoryScanLocator
from slidereel.capture.workspace import (
    SESSIONS_PREFIX,
    SessionWorkspace,
    new_session_id,
    sanitize_session_id,
)
from slidereel.core.errors import ArtifactIOError


class TestSessionIds:
    def test_new_session_ids_are_unique(self):
        ids = {new_session_id(3) for _ in range(50)}
        assert len(ids) == 50
        assert all(sid.startswith("slide_3_") for sid in ids)

    def test_sanitize_strips_path_characters(self):
        assert sanitize_session_id("../../etc/passwd") == "etc_passwd"
        assert sanitize_session_id("deck 7/slide 2") == "deck_7_slide_2"

    def test_sanitize_rejects_empty(self):
        with pytest.raises(ValueError):
            sanitize_session_id("///")


class TestSessionWorkspace:
    def test_create_is_exclusive(self, tmp_path):
        workspace = SessionWorkspace(tmp_path, "abc")
        created = workspace.create()

        assert created == tmp_path / SESSIONS_PREFIX / "abc"
        assert created.is_dir()
        with pytest.raises(ArtifactIOError):
            SessionWorkspace(tmp_path, "abc").create()

    def test_artifact_path(self, tmp_path):
        workspace = SessionWorkspace(tmp_path, "abc")
        assert workspace.artifact_path("webm") == tmp_path / "abc.webm"
        assert workspace.artifact_path(".webm") == tmp_path / "abc.webm"

    def test_move_and_discard(self, tmp_path):
        workspace = SessionWorkspace(tmp_path, "abc")
        session_dir = workspace.create()
        capture = session_dir / "raw.webm"
        capture.write_bytes(b"data")

        moved = workspace.move_artifact(capture, workspace.artifact_path(".webm"))

        assert moved.read_bytes() == b"data"
        assert workspace.discard_if_empty() is True
        assert not session_dir.exists()

    def test_move_failure_keeps_source(self, tmp_path):
        workspace = SessionWorkspace(tmp_path, "abc")
        session_dir = workspace.create()
        capture = session_dir / "raw.webm"
        capture.write_bytes(b"data")
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(ArtifactIOError) as exc_info:
            workspace.move_artifact(capture, blocker / "out.webm")

        assert exc_info.value.session_id == "abc"
        assert capture.exists()


class TestDirectoryScanLocator:
    @pytest.mark.asyncio
    async def test_finds_matching_extension(self, tmp_path):
        (tmp_path / "notes.txt").write_text("x")
        (tmp_path / "b.webm").write_bytes(b"b")
        (tmp_path / "a.WEBM").write_bytes(b"a")

        found = await DirectoryScanLocator().locate(tmp_path, ".webm")

        assert found == tmp_path / "a.WEBM"

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path):
        assert await DirectoryScanLocator().locate(tmp_path / "nope", ".webm") is None

    @pytest.mark.asyncio
    async def test_no_match(self, tmp_path):
        (tmp_path / "notes.txt").write_text("x")
        assert await DirectoryScanLocator().locate(tmp_path, ".webm") is None


class TestArtifactDestination:
    def test_existing_destination_is_not_overwritten(self, tmp_path):
        workspace = SessionWorkspace(tmp_path, "abc")
        session_dir = workspace.create()
        capture = session_dir / "raw.webm"
        capture.write_bytes(b"new")
        destination = workspace.artifact_path(".webm")
        destination.write_bytes(b"old")

        with pytest.raises(ArtifactIOError, match="already exists"):
            workspace.move_artifact(capture, destination)

        assert destination.read_bytes() == b"old"
        assert capture.exists()
