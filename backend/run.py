#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Reads HOST/PORT/RELOAD from the environment so the same script works
locally and inside a container.
"""
import os
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn

if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "true").lower() in {"1", "true", "yes"}

    print(f"Starting TrainerLocator API at http://localhost:{port}")
    print(f"API Docs: http://localhost:{port}/docs")

    uvicorn.run("app.main:app", host=host, port=port, reload=reload, log_level="info")
