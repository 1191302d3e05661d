"""WSGI entry point: `flask --app app run`."""

from src.event_portal.event_portal.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config.get("DEBUG", False))
