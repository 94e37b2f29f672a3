"""
Run FastAPI HTTP Server

Starts the FastAPI server for resume analysis.
"""

import os
import uvicorn
from resume_review.config import get_config

if __name__ == "__main__":
    config = get_config()

    # Hosting platforms provide PORT environment variable, use it if available
    # Otherwise fall back to config
    port = int(os.environ.get("PORT", config.server.port))
    host = os.environ.get("HOST", config.server.host)

    uvicorn.run(
        "resume_review.api.main:app",
        host=host,
        port=port,
        reload=False,  # Disable reload for production
        log_level="info",
    )
