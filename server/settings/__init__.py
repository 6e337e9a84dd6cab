"""Django settings for the shop file manager.

Settings are split into components, each covering one concern.
Values come from the environment or `config/.env` via python-decouple.
"""

from server.settings.components.common import *  # noqa: F401, F403, WPS347
from server.settings.components.files import *  # noqa: F401, F403, WPS347
from server.settings.components.logging import *  # noqa: F401, F403, WPS347
from server.settings.components.storages import *  # noqa: F401, F403, WPS347
