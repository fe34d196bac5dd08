"""
SafeHer Assistant - FastAPI Entry Point

Start with:  uvicorn app:app --reload
"""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from api.routes import router

load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s — %(message)s")

app = FastAPI(
    title="SafeHer Assistant API",
    description="Nearby emergency services and safety advice",
    version="0.1.0",
)


@app.get("/")
def root(request: Request):
    """Quick check that the server is up. Links use the same host/port you used to connect."""
    base = str(request.base_url).rstrip("/")
    return {
        "message": "SafeHer Assistant API is running",
        "docs_simple": f"{base}/docs-simple",
        "health": f"{base}/api/v1/health",
    }


@app.get("/docs-simple", response_class=HTMLResponse)
def docs_simple():
    """Lightweight API docs, no external CDN."""
    return """
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>SafeHer Assistant API</title>
  <style>
    body { font-family: system-ui; max-width: 640px; margin: 2rem auto; padding: 0 1rem; }
    .endpoint { margin: 1.5rem 0; padding: 1rem; border: 1px solid #eee; border-radius: 8px; }
    .method { font-weight: bold; color: #0a0; }
    code { background: #f0f0f0; padding: 2px 6px; }
  </style>
</head>
<body>
  <h1>SafeHer Assistant API</h1>

  <div class="endpoint">
    <span class="method">GET</span> <code>/api/v1/health</code>
    <p>Server status and which providers are configured.</p>
  </div>

  <div class="endpoint">
    <span class="method">POST</span> <code>/api/v1/sessions</code>
    <p>Body: <code>{"lat": 43.65, "lon": -79.38, "mode": "emergency"}</code> (lat/lon optional)</p>
    <p>Open a conversation; returns the session id and greeting.</p>
  </div>

  <div class="endpoint">
    <span class="method">POST</span> <code>/api/v1/sessions/{id}/messages</code>
    <p>Body: <code>{"text": "Where is the nearest hospital?"}</code></p>
  </div>

  <div class="endpoint">
    <span class="method">PUT</span> <code>/api/v1/sessions/{id}/mode</code>
    <p>Body: <code>{"mode": "advice"}</code></p>
  </div>

  <div class="endpoint">
    <span class="method">POST</span> <code>/api/v1/nearby</code>
    <p>Body: <code>{"lat": 43.65, "lon": -79.38, "query": "pharmacy"}</code></p>
  </div>

  <div class="endpoint">
    <span class="method">POST</span> <code>/api/v1/advice</code>
    <p>Body: <code>{"question": "Is it safe to walk alone at night?"}</code></p>
  </div>

  <p>Raw OpenAPI schema: <a href="/openapi.json" target="_blank">/openapi.json</a></p>
</body>
</html>
"""


app.include_router(router, prefix="/api/v1")
