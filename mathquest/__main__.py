# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Run the MathQuest API with uvicorn: ``python -m mathquest``."""

import uvicorn

from mathquest.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "mathquest.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )


if __name__ == "__main__":
    main()
