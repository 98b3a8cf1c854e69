import tkinter as tk

from logics.config import AppConfig
from UIs.app import AnalysisApp


def main():
    try:
        config = AppConfig.from_env()
        print(f"[DEBUG] Starting GUI with {config}")
        root = tk.Tk()
        AnalysisApp(root, config)
        root.mainloop()
    except Exception as e:
        print("[ERROR]", str(e))
        import traceback
        traceback.print_exc()
        raise SystemExit(1)


if __name__ == "__main__":
    main()
