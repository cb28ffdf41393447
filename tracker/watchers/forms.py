from django import forms
from django.contrib.auth import get_user_model


class AddWatchersForm(forms.Form):
    """Pick users to add as watchers of one object."""

    user_ids = forms.ModelMultipleChoiceField(
        queryset=get_user_model().objects.none(),
        widget=forms.CheckboxSelectMultiple,
        label="Users",
        error_messages={"required": "Select at least one user."},
    )

    def __init__(self, *args, watchable, **kwargs):
        super().__init__(*args, **kwargs)
        addable = watchable.addable_watcher_users()
        self.fields["user_ids"].queryset = get_user_model().objects.filter(
            pk__in=[user.pk for user in addable]
        ).order_by("email")


class WatchableAdminForm(forms.ModelForm):
    """Admin form for watchable models with a watcher picker.

    The picked ids go through the bulk `watcher_user_ids` setter, which
    drops repeated ids before replacing the watcher set.
    """

    watcher_user_ids = forms.TypedMultipleChoiceField(
        coerce=int,
        required=False,
        label="Watchers",
        widget=forms.SelectMultiple(attrs={"size": 10}),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        field = self.fields["watcher_user_ids"]
        field.choices = get_user_model().objects.order_by("email").values_list(
            "pk", "email"
        )
        if self.instance.pk:
            field.initial = self.instance.watcher_user_ids

    def save_watchers(self):
        self.instance.watcher_user_ids = self.cleaned_data["watcher_user_ids"]
