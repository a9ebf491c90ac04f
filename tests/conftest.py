import io
import os
import sys

import pytest

# Make the tool modules under python/ importable without installing them
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "python"))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


class ReplayStdin:
    """Stands in for a terminal: each session ends with its own end-of-file."""

    def __init__(self, *sessions):
        self.sessions = [io.BytesIO(s) for s in sessions]

    def readline(self):
        if not self.sessions:
            return b''
        line = self.sessions[0].readline()
        if not line:
            self.sessions.pop(0)
        return line


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_bytes(b"one\n\ntwo\n")
    return path


@pytest.fixture
def replay_stdin():
    return ReplayStdin
