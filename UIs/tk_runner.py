import threading
import traceback

from logics.errors import AnalysisError


class TkRunner:
    """
    Runs a blocking call in a background thread and hands the outcome back
    to the Tk main loop.

    Usage:
        runner = TkRunner(root)
        runner(lambda: client.upload(f), on_success=..., on_error=...)

    Args:
        root: Tk root whose ``after`` schedules callbacks on the main thread.
    """

    def __init__(self, root):
        self._root = root

    def __call__(self, fn, on_success, on_error):
        """
        Execute fn in a daemon thread, then call on_success(result) or
        on_error(exception) on the main thread.

        Service and validation errors are reported to the user by the
        session; only unexpected exceptions get a traceback on the console.
        """
        thread = threading.Thread(target=self._background, args=(fn, on_success, on_error), daemon=True)
        thread.start()
        return thread

    def _background(self, fn, on_success, on_error):
        try:
            result = fn()
        except AnalysisError as e:
            print(f"[ERROR] {type(e).__name__}: {e}")
            self._root.after(0, lambda err=e: on_error(err))
            return
        except Exception as e:
            print(f"\n[ERROR] {type(e).__name__}: {e}")
            traceback.print_exc()
            self._root.after(0, lambda err=e: on_error(err))
            return
        self._root.after(0, lambda: on_success(result))
