#!/usr/bin/env python3
# run.py
"""
Development server runner.

Settings come from the environment and ``.env``; see ``fitflow.core.config``.
"""
import os

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting FitFlow API at http://localhost:{port} (docs at /docs)")

    uvicorn.run("fitflow.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
