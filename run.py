"""Project root entry point for launching the web API."""

from __future__ import annotations

import os

from localizer.web import create_app


def main():
    app = create_app(os.environ.get("LOCALIZER_PROJECT_ROOT"))
    app.run(
        host=os.environ.get("LOCALIZER_HOST", "127.0.0.1"),
        port=int(os.environ.get("LOCALIZER_PORT", "5500")),
        debug=os.environ.get("LOCALIZER_DEBUG", "").lower() in ("1", "true", "yes"),
    )


if __name__ == "__main__":
    main()
