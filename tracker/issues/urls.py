from django.urls import path

from . import views

urlpatterns = [
    path("<int:pk>/", views.issue_detail, name="issue_detail"),
]
