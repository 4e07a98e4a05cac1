import os
from flask import Flask
from dotenv import load_dotenv

from .config import USER_SELECT_GROUP


def create_app(test_config=None):
    load_dotenv()

    app = Flask(__name__)
    app.config.from_mapping(
        JIRA_SERVER=os.getenv("JIRA_SERVER"),
        JIRA_EMAIL=os.getenv("JIRA_EMAIL"),
        JIRA_API_TOKEN=os.getenv("JIRA_API_TOKEN"),
        JIRA_TIMEOUT=float(os.getenv("JIRA_TIMEOUT", "30")),
        USER_SELECT_GROUP=USER_SELECT_GROUP,
    )
    if test_config:
        app.config.update(test_config)

    if not app.debug and not app.testing:
        import logging
        from logging import FileHandler
        file_handler = FileHandler('error.log')
        file_handler.setLevel(logging.WARNING)
        app.logger.addHandler(file_handler)

    with app.app_context():
        from . import routes
        app.register_blueprint(routes.bp)

    return app
