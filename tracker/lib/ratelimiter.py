"""Rate limit decorators for tracker views.

SECURITY: These decorators keep authenticated clients from hammering
the write endpoints (watch toggles, watcher management).
"""

from django_ratelimit.decorators import ratelimit

ratelimit_watch = ratelimit(
    key="user_or_ip", rate="30/m", method=["POST", "DELETE"], block=True
)
ratelimit_manage_watchers = ratelimit(
    key="user_or_ip", rate="20/m", method=["POST", "DELETE"], block=True
)
