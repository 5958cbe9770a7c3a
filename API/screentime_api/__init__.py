import logging

from flask import Flask

from .fixtures import load_mock_data
from .services import AuthService, ExtensionWorkflow, GroupTracker, NotificationsTracker
from .store import MemoryStore
from .views import register_blueprints

logger = logging.getLogger(__name__)


def create_app(config_object='screentime_api.config.Config'):

    app = Flask(__name__)
    app.config.from_object(config_object)
    # Всё хранится в памяти процесса
    app.db = MemoryStore(app.config['COLLECTIONS'])
    if app.config.get('LOAD_MOCK_DATA'):
        load_mock_data(app.db)

    app.auth_service = AuthService(app.db)
    app.notifications = NotificationsTracker(app.db)
    app.group_tracker = GroupTracker(app.db, app.notifications)
    app.extension_workflow = ExtensionWorkflow(app.db, app.group_tracker, app.notifications,
                                               approval_threshold=app.config['APPROVAL_THRESHOLD'])

    logger.info("Realtime channels %s are not connected, events stay in process",
                ", ".join(app.config['REALTIME_CHANNELS'].values()))
    register_blueprints(app)

    return app
