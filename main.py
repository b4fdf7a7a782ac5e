"""
main.py: launch the hold service with uvicorn.

    python main.py

Host, port and whether the API docs open in a browser come from
``HBA_API_HOST``, ``HBA_API_PORT`` and ``HBA_OPEN_BROWSER``. The Streamlit
dashboard is started separately with ``streamlit run dashboard/app.py``.
"""

from __future__ import annotations

import threading
import webbrowser

import uvicorn

from hba_backend.utils.config import Settings, get_settings


def _banner(settings: Settings, base_url: str) -> str:
    rule = "=" * 60
    sweeper = (
        f"every {settings.sweep_interval_seconds:.0f}s" if settings.sweeper_enabled else "disabled"
    )
    return "\n".join(
        [
            rule,
            f"  {settings.app_name} v{settings.app_version}",
            rule,
            f"  Server    : {base_url}",
            f"  API docs  : {base_url}/docs",
            f"  Hold TTL  : {settings.hold_duration_seconds}s "
            f"(+{settings.hold_extension_seconds}s per extension)",
            f"  Sweeper   : {sweeper}",
            rule,
        ]
    )


def main() -> None:
    settings = get_settings()
    base_url = f"http://{settings.api_host}:{settings.api_port}"
    print(_banner(settings, base_url))

    if settings.open_browser:
        opener = threading.Timer(2.0, webbrowser.open, args=(f"{base_url}/docs",))
        opener.daemon = True
        opener.start()

    # Holds live in process memory, so one worker and no autoreload.
    uvicorn.run(
        "app:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=1,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
