"""WSGI entry point for the todo service."""

import os

from todo_app import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["PORT"])
