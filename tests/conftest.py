"""
Shared fixtures: a scripted service client and runners that control when
responses arrive.
"""

import os
import sys

import matplotlib
matplotlib.use('Agg')

import pytest

# Make logics/ importable when running from a checkout
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from logics.data_model import ColumnDescriptor, ResultBundle, UploadedFile


class FakeClient:
    """
    Records calls and answers from scripted responses.

    Each scripted entry is either a return value or an exception instance
    to raise.
    """

    def __init__(self, uploads=(), processes=()):
        self.uploads = list(uploads)
        self.processes = list(processes)
        self.upload_calls = []
        self.process_calls = []

    def upload(self, uploaded_file):
        self.upload_calls.append(uploaded_file)
        return self._next(self.uploads)

    def process_columns(self, file_path, column_types):
        self.process_calls.append((file_path, dict(column_types)))
        return self._next(self.processes)

    @staticmethod
    def _next(script):
        outcome = script.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class DeferredRunner:
    """Queues calls; flush() runs them later, like a worker thread would."""

    def __init__(self):
        self.pending = []

    def __call__(self, fn, on_success, on_error):
        self.pending.append((fn, on_success, on_error))

    def flush(self):
        while self.pending:
            self.run_next()

    def run_next(self):
        fn, on_success, on_error = self.pending.pop(0)
        try:
            result = fn()
        except Exception as e:
            on_error(e)
        else:
            on_success(result)


def columns_response(columns, file_path):
    return [ColumnDescriptor(name, tuple(values)) for name, values in columns.items()], file_path


@pytest.fixture
def data_file():
    return UploadedFile("data.csv", b"A,B\nx,p\ny,q\n")


@pytest.fixture
def ab_upload():
    return columns_response({'A': ['x', 'y'], 'B': ['p', 'q']}, '/tmp/1')


@pytest.fixture
def distance_bundle():
    return ResultBundle(distance_matrix=[[0, 1], [1, 0]])


@pytest.fixture
def full_bundle():
    return ResultBundle(
        distance_matrix=[[0, 1.5], [1.5, 0]],
        burt_matrix=[[2, 0, 1], [0, 3, 1], [1, 1, 2]],
        contingency_tables={
            'A_B': [[1, 2], [3, 4]],
            'A_C': [[5, 0], [0, 5]],
        },
        freq_tables={'A_B': [[0.1, 0.2], [0.3, 0.4]]},
    )
