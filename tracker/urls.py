from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView

urlpatterns = [
    path("", RedirectView.as_view(url="/admin/", permanent=False)),
    path("u/settings/", include("tracker.users.urls")),
    path("monitoring/", include("tracker.lib.urls")),
    path("admin/", admin.site.urls),
    path("issues/", include("tracker.issues.urls")),
    path("documents/", include("tracker.documents.urls")),
    # watch/unwatch/watchers routes of every registered watchable
    path("", include("tracker.watchers.urls")),
]
