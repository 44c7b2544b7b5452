"""Root landing page with service status and API links."""

from html import escape


def render_root_page(app_name: str, version: str, firestore_ready: bool) -> str:
    """Return HTML for the root landing page."""
    status = "connected" if firestore_ready else "not configured"
    status_class = "ok" if firestore_ready else "warn"
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(app_name)}</title>
    <style>
        body {{
            font-family: system-ui, sans-serif;
            margin: 0;
            min-height: 100vh;
            background: #0f172a;
            color: #e2e8f0;
            padding: 2rem 1rem;
        }}
        .wrap {{ max-width: 560px; margin: 0 auto; }}
        h1 {{ font-size: 2rem; margin: 0 0 0.25rem 0; color: #fff; }}
        .tagline {{ color: #94a3b8; margin: 0 0 2rem 0; }}
        .card {{
            background: #1e293b;
            border: 1px solid #334155;
            border-radius: 6px;
            padding: 1.25rem 1.5rem;
            margin-bottom: 1rem;
        }}
        .card h2 {{
            font-size: 0.75rem;
            text-transform: uppercase;
            letter-spacing: 0.08em;
            color: #94a3b8;
            margin: 0 0 0.75rem 0;
        }}
        .ok {{ color: #4ade80; }}
        .warn {{ color: #facc15; }}
        a.btn {{
            display: inline-block;
            margin-right: 0.5rem;
            padding: 0.5rem 1rem;
            border: 1px solid #475569;
            border-radius: 4px;
            color: #e2e8f0;
            text-decoration: none;
        }}
        a.btn.primary {{ background: #2563eb; border-color: #2563eb; }}
        code {{ font-family: ui-monospace, monospace; color: #cbd5e1; }}
    </style>
</head>
<body>
    <div class="wrap">
        <h1>{escape(app_name)}</h1>
        <p class="tagline">Civic issue administration API &middot; v{escape(version)}</p>
        <div class="card">
            <h2>Status</h2>
            <p>Data store: <span class="{status_class}">{status}</span></p>
            <p>Health: <code>GET /api/v1/health/ready</code></p>
        </div>
        <div class="card">
            <h2>API</h2>
            <p>All routes under <code>/api/v1</code> need a staff bearer token.</p>
            <a href="/docs" class="btn primary">Open API docs (Swagger)</a>
            <a href="/redoc" class="btn">ReDoc</a>
        </div>
    </div>
</body>
</html>
"""
