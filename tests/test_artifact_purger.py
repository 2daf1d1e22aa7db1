"""
Unit tests for the artifact purger module.
"""

import os
import time

import pytest

from slidereel.capture.workspace import SESSIONS_PREFIX
from slidereel.jobs.artifact_purger import ArtifactPurger, remove_artifact


def _age(path, seconds):
    stamp = time.time() - seconds
    os.utime(path, (stamp, stamp))


class TestRemoveArtifact:
    def test_removes_file(self, tmp_path):
        artifact = tmp_path / "a.webm"
        artifact.write_bytes(b"x")

        assert remove_artifact(artifact) is True
        assert not artifact.exists()

    def test_missing_file(self, tmp_path):
        assert remove_artifact(tmp_path / "gone.webm") is False


class TestArtifactPurger:
    """Test cases for the ArtifactPurger class."""

    @pytest.fixture
    def purger(self, work_dir):
        return ArtifactPurger(work_dir)

    def test_purges_only_stale_entries(self, purger, work_dir):
        """Test that entries older than the window are removed and fresh ones kept."""
        sessions = work_dir / SESSIONS_PREFIX
        old_session = sessions / "old"
        old_session.mkdir(parents=True)
        (old_session / "capture.webm").write_bytes(b"x")
        _age(old_session / "capture.webm", 7200)
        _age(old_session, 7200)

        fresh_session = sessions / "fresh"
        fresh_session.mkdir()

        old_artifact = work_dir / "old.webm"
        old_artifact.write_bytes(b"x")
        _age(old_artifact, 7200)
        fresh_artifact = work_dir / "fresh.webm"
        fresh_artifact.write_bytes(b"x")

        removed = purger.purge_stale(max_age_seconds=3600)

        assert removed == 2
        assert not old_session.exists()
        assert not old_artifact.exists()
        assert fresh_session.exists()
        assert fresh_artifact.exists()

    def test_recent_child_keeps_session(self, purger, work_dir):
        """Test that a session with a fresh capture file is not purged."""
        session = work_dir / SESSIONS_PREFIX / "busy"
        session.mkdir(parents=True)
        (session / "capture.webm").write_bytes(b"x")
        _age(session, 7200)

        assert purger.collect_stale(3600) == []

    def test_missing_work_dir(self, tmp_path):
        purger = ArtifactPurger(tmp_path / "missing")
        assert purger.purge_stale(max_age_seconds=0) == 0

    def test_uses_explicit_clock(self, purger, work_dir):
        artifact = work_dir / "clip.webm"
        artifact.write_bytes(b"x")
        future = time.time() + 10_000

        assert purger.collect_stale(3600, now=future) == [artifact]
