"""
Tests for AnalysisSession: ordering of the upload/process calls and the
state machine.
"""

import pytest

from conftest import DeferredRunner, FakeClient, columns_response
from logics.column_types import ColumnType, ColumnTypeRegistry
from logics.data_model import ResultBundle, SessionPhase, UploadedFile
from logics.errors import ServiceError, TransportError, ValidationError
from logics.session import PROCESS_FAILED, UPLOAD_FAILED, AnalysisSession


def make_session(client, runner=None):
    if runner is None:
        return AnalysisSession(client)
    return AnalysisSession(client, runner=runner)


class TestPreconditions:
    def test_upload_without_file(self):
        client = FakeClient()
        session = make_session(client)
        with pytest.raises(ValidationError):
            session.upload()
        assert client.upload_calls == []
        assert session.phase is SessionPhase.IDLE

    def test_process_before_upload(self, data_file):
        client = FakeClient()
        session = make_session(client)
        session.select_file(data_file)
        with pytest.raises(ValidationError):
            session.process()
        with pytest.raises(ValidationError):
            session.process('/tmp/1')
        assert client.process_calls == []

    def test_process_with_foreign_handle(self, data_file, ab_upload):
        client = FakeClient(uploads=[ab_upload])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()
        with pytest.raises(ValidationError):
            session.process('/tmp/other')
        assert client.process_calls == []

    def test_unset_columns_block_processing(self, data_file, ab_upload):
        client = FakeClient(uploads=[ab_upload])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()
        session.set_column_type('A', '0')

        with pytest.raises(ValidationError) as excinfo:
            session.process()
        assert excinfo.value.missing == ['B']
        assert client.process_calls == []
        assert session.phase is SessionPhase.COLUMNS_READY

    def test_unknown_column(self, data_file, ab_upload):
        session = make_session(FakeClient(uploads=[ab_upload]))
        session.select_file(data_file)
        session.upload()
        with pytest.raises(ValidationError):
            session.set_column_type('Z', '1')


class TestHappyPath:
    def test_scenario(self, data_file, ab_upload, distance_bundle):
        client = FakeClient(uploads=[ab_upload], processes=[distance_bundle])
        session = make_session(client)

        session.select_file(data_file)
        assert session.upload() is True
        assert session.phase is SessionPhase.COLUMNS_READY
        assert [c.name for c in session.columns] == ['A', 'B']
        assert session.file_handle == '/tmp/1'
        # Columns are not classified yet, so nothing is chained
        assert client.process_calls == []

        session.set_column_type('A', '0')
        session.set_column_type('B', '1')
        assert session.process() is True

        assert client.process_calls == [('/tmp/1', {'A': '0', 'B': '1'})]
        assert session.results.distance_matrix == [[0, 1], [1, 0]]
        assert session.loading is False
        assert session.error is None
        assert session.phase is SessionPhase.RESULTS_READY

    def test_upload_chains_process_when_nothing_to_classify(self, data_file, distance_bundle):
        client = FakeClient(uploads=[([], '/tmp/empty')], processes=[distance_bundle])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()
        assert client.process_calls == [('/tmp/empty', {})]
        assert session.phase is SessionPhase.RESULTS_READY

    def test_explicit_registry(self, data_file, ab_upload, distance_bundle):
        client = FakeClient(uploads=[ab_upload], processes=[distance_bundle])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()

        registry = ColumnTypeRegistry()
        registry.set('A', ColumnType.ORDINAL)
        registry.set('B', 'nominal')
        session.process('/tmp/1', registry)
        assert client.process_calls == [('/tmp/1', {'A': '1', 'B': '0'})]

    def test_plain_mapping_of_types(self, data_file, ab_upload, distance_bundle):
        client = FakeClient(uploads=[ab_upload], processes=[distance_bundle])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()

        session.process('/tmp/1', {'A': '0', 'B': '1'})
        assert client.process_calls == [('/tmp/1', {'A': '0', 'B': '1'})]
        assert session.results.distance_matrix == [[0, 1], [1, 0]]

    def test_plain_mapping_with_unset_column(self, data_file, ab_upload):
        client = FakeClient(uploads=[ab_upload])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()

        with pytest.raises(ValidationError) as excinfo:
            session.process('/tmp/1', {'A': '1', 'B': ''})
        assert excinfo.value.missing == ['B']
        assert client.process_calls == []

    def test_listeners_see_loading(self, data_file, ab_upload):
        runner = DeferredRunner()
        seen = []
        session = AnalysisSession(FakeClient(uploads=[ab_upload]), runner=runner,
                                  listeners=[lambda s: seen.append((s.phase, s.loading))])
        session.select_file(data_file)
        session.upload()
        runner.flush()
        assert seen == [
            (SessionPhase.IDLE, False),
            (SessionPhase.UPLOADING, True),
            (SessionPhase.COLUMNS_READY, False),
        ]


class TestFailures:
    def test_upload_service_error(self, data_file):
        client = FakeClient(uploads=[ServiceError("bad format")])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()
        assert session.error == "bad format"
        assert session.loading is False
        assert session.phase is SessionPhase.ERROR
        assert client.process_calls == []

    def test_upload_transport_error(self, data_file):
        session = make_session(FakeClient(uploads=[TransportError("connection refused")]))
        session.select_file(data_file)
        session.upload()
        assert session.error == UPLOAD_FAILED
        assert session.loading is False

    def test_unexpected_exception_is_transport_failure(self, data_file):
        session = make_session(FakeClient(uploads=[KeyError('columns')]))
        session.select_file(data_file)
        session.upload()
        assert session.error == UPLOAD_FAILED

    def test_process_failure_keeps_previous_results(self, data_file, ab_upload, distance_bundle):
        client = FakeClient(
            uploads=[ab_upload],
            processes=[distance_bundle, TransportError("timed out"), ServiceError("colonne vide")],
        )
        session = make_session(client)
        session.select_file(data_file)
        session.upload()
        session.set_column_type('A', '0')
        session.set_column_type('B', '0')
        session.process()
        first = session.results

        session.process()
        assert session.error == PROCESS_FAILED
        assert session.results is first
        assert session.loading is False

        session.process()
        assert session.error == "colonne vide"

    def test_recovers_after_error(self, data_file, ab_upload):
        client = FakeClient(uploads=[ServiceError("bad format"), ab_upload])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()
        assert session.phase is SessionPhase.ERROR

        session.upload()
        assert session.phase is SessionPhase.COLUMNS_READY
        assert session.error is None


class TestConcurrency:
    def test_second_upload_while_loading(self, data_file, ab_upload):
        runner = DeferredRunner()
        client = FakeClient(uploads=[ab_upload, ab_upload])
        session = make_session(client, runner)
        session.select_file(data_file)

        assert session.upload() is True
        assert session.loading is True
        assert session.upload() is False
        runner.flush()
        assert len(client.upload_calls) == 1
        assert session.phase is SessionPhase.COLUMNS_READY

    def test_process_while_processing(self, data_file, ab_upload, distance_bundle):
        runner = DeferredRunner()
        client = FakeClient(uploads=[ab_upload], processes=[distance_bundle])
        session = make_session(client, runner)
        session.select_file(data_file)
        session.upload()
        runner.flush()
        session.set_column_type('A', '0')
        session.set_column_type('B', '1')

        assert session.process() is True
        assert session.process() is False
        with pytest.raises(ValidationError):
            session.set_column_type('A', '1')
        runner.flush()
        assert len(client.process_calls) == 1

    def test_stale_upload_is_discarded(self, data_file, ab_upload):
        runner = DeferredRunner()
        newer = columns_response({'C': ['1', '2']}, '/tmp/2')
        client = FakeClient(uploads=[ab_upload, newer])
        session = make_session(client, runner)

        session.select_file(data_file)
        session.upload()
        session.select_file(UploadedFile("other.csv", b"C\n1\n2\n"))
        session.upload()

        runner.run_next()       # response for data.csv arrives late
        assert session.columns == []
        assert session.phase is SessionPhase.UPLOADING

        runner.run_next()
        assert [c.name for c in session.columns] == ['C']
        assert session.file_handle == '/tmp/2'

    def test_stale_error_is_discarded(self, data_file):
        runner = DeferredRunner()
        client = FakeClient(uploads=[ServiceError("late failure")])
        session = make_session(client, runner)
        session.select_file(data_file)
        session.upload()
        session.select_file(UploadedFile("other.csv", b""))
        runner.flush()
        assert session.error is None
        assert session.phase is SessionPhase.IDLE

    def test_stale_results_are_discarded(self, data_file, ab_upload, distance_bundle):
        runner = DeferredRunner()
        client = FakeClient(uploads=[ab_upload], processes=[distance_bundle])
        session = make_session(client, runner)
        session.select_file(data_file)
        session.upload()
        runner.flush()
        session.set_column_type('A', '0')
        session.set_column_type('B', '0')
        session.process()
        session.select_file(data_file)
        runner.flush()
        assert session.results is None


class TestSelectFile:
    def test_resets_everything_downstream(self, data_file, ab_upload, distance_bundle):
        client = FakeClient(uploads=[ab_upload], processes=[distance_bundle])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()
        session.set_column_type('A', '0')
        session.set_column_type('B', '1')
        session.process()

        replacement = UploadedFile("next.csv", b"x")
        session.select_file(replacement)
        assert session.state.file is replacement
        assert session.columns == []
        assert session.file_handle is None
        assert len(session.column_types) == 0
        assert session.results is None
        assert session.error is None
        assert session.phase is SessionPhase.IDLE

    def test_upload_clears_previous_types(self, data_file, ab_upload):
        client = FakeClient(uploads=[ab_upload, ab_upload])
        session = make_session(client)
        session.select_file(data_file)
        session.upload()
        session.set_column_type('A', '1')
        session.upload()
        assert session.column_types.get('A') is ColumnType.UNSET


def test_results_bundle_type(data_file, ab_upload):
    bundle = ResultBundle(contingency_tables={'A_B': [[1]]})
    client = FakeClient(uploads=[ab_upload], processes=[bundle])
    session = make_session(client)
    session.select_file(data_file)
    session.upload()
    session.set_column_type('A', 'ordinal')
    session.set_column_type('B', ColumnType.NOMINAL)
    session.process()
    assert session.results is bundle
