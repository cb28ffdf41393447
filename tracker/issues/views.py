from django.http import Http404
from django.shortcuts import get_object_or_404, render

from .models import Issue


def issue_detail(request, pk):
    """Show an issue with its watchers."""
    issue = get_object_or_404(Issue, pk=pk)
    if not issue.visible(request.user):
        raise Http404

    return render(
        request,
        "issues/detail.html",
        {
            "issue": issue,
            "watchers": issue.watcher_users.order_by("email"),
        },
    )
