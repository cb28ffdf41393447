from django import forms

from .models import UserProfile


class UserSettingsForm(forms.Form):
    display_name = forms.CharField(
        max_length=255,
        required=False,
        widget=forms.TextInput(attrs={"class": "input-text w-full"}),
    )
    mail_notification = forms.ChoiceField(
        choices=UserProfile.MailNotification.choices,
        widget=forms.Select(attrs={"class": "input-select w-full"}),
    )
