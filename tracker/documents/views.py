from django.shortcuts import get_object_or_404, render

from .models import Document


def document_detail(request, pk):
    document = get_object_or_404(Document, pk=pk)
    return render(
        request,
        "documents/detail.html",
        {
            "document": document,
            "watchers": document.watcher_users.order_by("email"),
        },
    )
