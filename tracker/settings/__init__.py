from .django import *  # noqa: F401,F403
from .project.logging import *  # noqa: F401,F403
from .project.security import *  # noqa: F401,F403
from .project.testing import *  # noqa: F401,F403
from .project.watchers import *  # noqa: F401,F403
from .third_party.sentry import *  # noqa: F401,F403
