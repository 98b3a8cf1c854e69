from logics.column_types import ColumnTypeRegistry
from logics.data_model import SessionPhase, SessionState
from logics.errors import ServiceError, ValidationError


UPLOAD_FAILED = "Erreur lors de l'upload du fichier"
PROCESS_FAILED = "Erreur lors du traitement des colonnes"
NO_FILE = "Veuillez sélectionner un fichier."
NO_UPLOAD = "Aucun fichier téléchargé: lancez d'abord l'upload."

_TRANSITIONS = {
    SessionPhase.IDLE: {SessionPhase.UPLOADING},
    SessionPhase.UPLOADING: {SessionPhase.COLUMNS_READY, SessionPhase.ERROR},
    SessionPhase.COLUMNS_READY: {SessionPhase.PROCESSING, SessionPhase.UPLOADING},
    SessionPhase.PROCESSING: {SessionPhase.RESULTS_READY, SessionPhase.ERROR},
    SessionPhase.RESULTS_READY: {SessionPhase.PROCESSING, SessionPhase.UPLOADING},
    SessionPhase.ERROR: {SessionPhase.PROCESSING, SessionPhase.UPLOADING},
}


def run_inline(fn, on_success, on_error):
    """Runner that performs the call synchronously on the caller's thread."""
    try:
        result = fn()
    except Exception as e:
        on_error(e)
    else:
        on_success(result)


class AnalysisSession:
    """
    Drives the upload -> process sequence against the analysis service.

    Network calls go through ``runner(fn, on_success, on_error)``: it calls
    the blocking ``fn`` wherever it likes (a worker thread in the GUI) and
    must deliver exactly one of the callbacks back on the session's thread.

    Every file selection bumps a token; responses that come back for an
    older token are dropped.

    Args:
        client: AnalysisServiceClient (or anything with upload/process_columns).
        runner: Callable used to perform network calls; defaults to run_inline.
        listeners: Callables(session) invoked after every state change.
    """

    def __init__(self, client, runner=run_inline, listeners=()):
        self.client = client
        self.runner = runner
        self.state = SessionState()
        self._listeners = list(listeners)

    # ── Observers ───────────────────────────────────────────

    def subscribe(self, listener):
        self._listeners.append(listener)

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)

    # ── Read-only views ─────────────────────────────────────

    @property
    def phase(self):
        return self.state.phase

    @property
    def loading(self):
        return self.state.loading

    @property
    def error(self):
        return self.state.error

    @property
    def results(self):
        return self.state.results

    @property
    def columns(self):
        return list(self.state.columns)

    @property
    def file_handle(self):
        return self.state.file_handle

    @property
    def column_types(self):
        return self.state.column_types

    # ── Operations ──────────────────────────────────────────

    def select_file(self, uploaded_file):
        """Replace the chosen file and forget everything derived from the old one."""
        state = self.state
        state.token += 1
        state.file = uploaded_file
        state.columns = []
        state.file_handle = None
        state.column_types.clear()
        state.results = None
        state.error_message = None
        state.phase = SessionPhase.IDLE
        print(f"[SESSION] Selected {uploaded_file.filename if uploaded_file else None} (token {state.token})")
        self._notify()

    def set_column_type(self, column, column_type):
        if self.loading:
            raise ValidationError("Impossible de modifier les types pendant un traitement.")
        if column not in self.state.column_names:
            raise ValidationError(f"Colonne inconnue: {column}")
        self.state.column_types.set(column, column_type)
        self._notify()

    def upload(self):
        """
        Send the selected file; on success continue with process().

        process() is chained only when every discovered column already has
        a type; otherwise the session waits in COLUMNS_READY.

        Returns:
            True if a request was started, False if one is already in flight.

        Raises:
            ValidationError: If no file has been selected.
        """
        if self.state.file is None:
            raise ValidationError(NO_FILE)
        if self.loading:
            print("[SESSION] Upload ignored: a request is already in flight")
            return False

        token = self.state.token
        uploaded_file = self.state.file
        self._enter(SessionPhase.UPLOADING)
        self._notify()

        self.runner(
            lambda: self.client.upload(uploaded_file),
            lambda result: self._upload_done(token, result),
            lambda exc: self._failed(token, exc, UPLOAD_FAILED),
        )
        return True

    def process(self, file_handle=None, column_types=None):
        """
        Ask the service to compute the matrices for the uploaded file.

        Args:
            file_handle: Defaults to the handle from the last upload; any other
                value is rejected.
            column_types: ColumnTypeRegistry, or a mapping column -> "0"/"1";
                defaults to the session's registry.

        Returns:
            True if a request was started, False if one is already in flight.

        Raises:
            ValidationError: No successful upload, a foreign handle, or
                columns without a type.
        """
        state = self.state
        if state.file_handle is None:
            raise ValidationError(NO_UPLOAD)
        if file_handle is not None and file_handle != state.file_handle:
            raise ValidationError(f"Fichier obsolète: {file_handle}")
        if self.loading:
            print("[SESSION] Process ignored: a request is already in flight")
            return False

        registry = column_types if column_types is not None else state.column_types
        if not isinstance(registry, ColumnTypeRegistry):
            registry = ColumnTypeRegistry()
            for column, column_type in column_types.items():
                registry.set(column, column_type)
        payload = registry.to_payload(state.column_names)

        token = state.token
        handle = state.file_handle
        self._enter(SessionPhase.PROCESSING)
        self._notify()

        self.runner(
            lambda: self.client.process_columns(handle, payload),
            lambda bundle: self._process_done(token, bundle),
            lambda exc: self._failed(token, exc, PROCESS_FAILED),
        )
        return True

    # ── Completion callbacks ────────────────────────────────

    def _upload_done(self, token, result):
        if self._is_stale(token, "upload"):
            return
        columns, file_path = result
        state = self.state
        state.columns = list(columns)
        state.file_handle = file_path
        state.column_types.clear()
        self._enter(SessionPhase.COLUMNS_READY)
        self._notify()

        if state.column_types.all_assigned(state.column_names):
            self.process()

    def _process_done(self, token, bundle):
        if self._is_stale(token, "process"):
            return
        self.state.results = bundle
        self._enter(SessionPhase.RESULTS_READY)
        self._notify()

    def _failed(self, token, exc, fallback_message):
        if self._is_stale(token, "failed"):
            return
        if isinstance(exc, ServiceError):
            message = str(exc)
        else:
            print(f"[ERROR] {fallback_message}: {exc}")
            message = fallback_message
        self.state.error_message = message
        self._enter(SessionPhase.ERROR)
        self._notify()

    # ── Helpers ──────────────────────────────────────────────

    def _is_stale(self, token, what):
        if token != self.state.token:
            print(f"[SESSION] Discarding stale {what} response (token {token}, current {self.state.token})")
            return True
        return False

    def _enter(self, phase):
        current = self.state.phase
        if phase not in _TRANSITIONS[current]:
            raise RuntimeError(f"Illegal session transition {current.value} -> {phase.value}")
        if phase is not SessionPhase.ERROR:
            self.state.error_message = None
        self.state.phase = phase
