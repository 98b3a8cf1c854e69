import requests

from logics.data_model import ColumnDescriptor, ResultBundle
from logics.errors import ServiceError, ShapeError, TransportError


class AnalysisServiceClient:
    """
    Blocking HTTP client for the analysis service.

    Both calls return decoded results or raise:
        - ServiceError when the JSON body carries an ``error`` field
          (whatever the HTTP status),
        - TransportError on connection failures, timeouts, non-JSON bodies,
          unexpected statuses and payloads that break the data model.

    Args:
        base_url: Service root, e.g. "http://127.0.0.1:5000".
        timeout: Seconds per request, or None to wait forever.
        session: Optional requests.Session (shared connection pool).
    """

    def __init__(self, base_url, timeout=None, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._http = session or requests

    def upload(self, uploaded_file):
        """
        Send the file as multipart field "file".

        Returns:
            tuple: (columns, file_path)
            - columns: list of ColumnDescriptor in response order
            - file_path: server-side handle for the process call
        """
        print(f"[UPLOAD] Sending {uploaded_file.filename} ({len(uploaded_file.content)} bytes)")
        data = self._post(
            '/upload',
            files={'file': (uploaded_file.filename, uploaded_file.content)},
        )

        columns = data.get('columns')
        file_path = data.get('file_path')
        if not isinstance(columns, dict) or not isinstance(file_path, str):
            raise TransportError("upload response lacks 'columns' or 'file_path'")

        descriptors = []
        for name, values in columns.items():
            if not isinstance(values, list):
                raise TransportError(f"upload response: preview for {name!r} is not a list")
            descriptors.append(ColumnDescriptor(str(name), tuple(str(v) for v in values)))

        print(f"[UPLOAD] {len(descriptors)} columns, file_path={file_path}")
        return descriptors, file_path

    def process_columns(self, file_path, column_types):
        """
        Ask the service to compute the matrices.

        Args:
            file_path: Handle returned by upload().
            column_types: dict column name -> "0" (nominal) / "1" (ordinal).

        Returns:
            ResultBundle
        """
        print(f"[PROCESS] Requesting matrices for {file_path} ({len(column_types)} columns)")
        data = self._post(
            '/process_columns',
            json={'file_path': file_path, 'column_types': column_types},
        )
        try:
            bundle = ResultBundle.from_payload(data)
        except ShapeError as e:
            raise TransportError(f"process response: {e}") from e

        print(f"[PROCESS] Received {len(bundle.contingency_tables)} contingency tables")
        return bundle

    def _post(self, path, **kwargs):
        url = self.base_url + path
        try:
            response = self._http.post(url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise TransportError(f"POST {path} timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"POST {path} failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                f"POST {path} returned a non-JSON body (HTTP {response.status_code})"
            ) from e

        if not isinstance(data, dict):
            raise TransportError(f"POST {path} returned {type(data).__name__}, expected an object")
        if data.get('error'):
            raise ServiceError(str(data['error']))
        if not response.ok:
            raise TransportError(f"POST {path} returned HTTP {response.status_code}")
        return data
