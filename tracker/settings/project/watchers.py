import environ

env = environ.FileAwareEnv()

# When True, registering a watchable model without a `visible(user)`
# predicate is reported as a system check error instead of a warning.
WATCHERS_REQUIRE_VISIBILITY = env.bool(
    "WATCHERS_REQUIRE_VISIBILITY", default=False
)
