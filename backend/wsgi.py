# backend/wsgi.py
# Entry point for `flask` (FLASK_APP=wsgi.py) and WSGI servers.
from spm import create_app

app = create_app()


if __name__ == "__main__":
    app.run(debug=app.config.get("APP_ENV") != "production")
