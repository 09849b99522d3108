"""Run with: python -m bedtime_stories"""

import uvicorn

from bedtime_stories.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "bedtime_stories.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
