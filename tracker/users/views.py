from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect, render

from tracker.users.forms import UserSettingsForm
from tracker.users.models import UserProfile


@login_required
def settings_view(request):
    """User settings page (display name, mail notifications)."""
    profile, _ = UserProfile.objects.get_or_create(user=request.user)

    if request.method == "POST":
        form = UserSettingsForm(request.POST)
        if form.is_valid():
            profile.display_name = form.cleaned_data["display_name"]
            profile.mail_notification = form.cleaned_data["mail_notification"]
            profile.save()
            messages.success(request, "Settings updated.")
            return redirect("user_settings")
    else:
        form = UserSettingsForm(
            initial={
                "display_name": profile.display_name,
                "mail_notification": profile.mail_notification,
            }
        )

    return render(request, "users/settings.html", {"form": form})
