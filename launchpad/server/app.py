# launchpad/server/app.py
"""Static landing page served by the container."""

from fastapi import FastAPI
from fastapi.responses import HTMLResponse


LANDING_PAGE = """
    <html>
      <head>
        <title>Launchpad</title>
        <style>
          body { font-family: sans-serif; display: flex; flex-direction: column; align-items: center; justify-content: center; height: 100vh; margin: 0; }
          h1 { color: #333; }
          .rocket { font-size: 3rem; }
          .subtitle { color: #666; font-size: 1.2rem; }
        </style>
      </head>
      <body>
        <div class="rocket">🚀</div>
        <h1>Launchpad is Live!</h1>
        <p class="subtitle">Deployment Successful.</p>
      </body>
    </html>
"""

# Only "/" is exposed, so the generated docs routes are disabled.
app = FastAPI(
    title="Launchpad",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.get("/", response_class=HTMLResponse)
def index():
    return HTMLResponse(content=LANDING_PAGE, status_code=200)
