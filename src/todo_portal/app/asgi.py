"""
ASGI entrypoint for external servers: `uvicorn todo_portal.app.asgi:app`.
The `todo-portal` console script (todo_portal.app.main:serve) runs the same app.

Importing todo_portal.app.main has no side effects; the app is only built here.
"""

from todo_portal.app.main import create_app

app = create_app()
