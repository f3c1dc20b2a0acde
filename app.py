"""
app.py - minimal entrypoint for Streamlit app

Keep this file tiny so streamlit can import it without side-effects.
Run the app with:
    streamlit run app.py

This module simply delegates to explog.ui.dashboard.main().

"""
import os
try:
    # If running on Streamlit Cloud, transfer secrets to env vars so explog.config can read them
    import streamlit as _st
    _secrets = getattr(_st, "secrets", {}) or {}
    for _k in ("EXPLOG_DATA_FILE", "EXPLOG_STORAGE", "EXPLOG_LOG_LEVEL", "EXPLOG_CURRENCY_SYMBOL"):
        if _k in _secrets and _secrets[_k] and _k not in os.environ:
            os.environ[_k] = str(_secrets[_k])
except Exception:
    # keep import-time side-effects minimal if streamlit or its secrets file isn't available
    pass

from explog.ui import dashboard


def main():
    dashboard.main()


if __name__ == "__main__":
    main()
