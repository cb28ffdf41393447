from .registry import registry

# Built when the root URLconf is first loaded, after every app's ready()
# has registered its watchable models.
urlpatterns = registry.urls
