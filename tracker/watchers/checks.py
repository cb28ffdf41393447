from django.conf import settings
from django.core import checks

from .models import has_visibility_rule
from .registry import registry


@checks.register(checks.Tags.models)
def check_watchable_visibility(app_configs, **kwargs):
    """Flag watchable models that let every user watch them."""
    errors = []
    strict = getattr(settings, "WATCHERS_REQUIRE_VISIBILITY", False)
    for prefix, model in registry:
        if has_visibility_rule(model):
            continue
        label = model._meta.label
        hint = f"Implement visible(user) on {label} to restrict watchers."
        if strict:
            errors.append(
                checks.Error(
                    f"{label} is watchable but defines no visibility rule.",
                    hint=hint,
                    obj=model,
                    id="watchers.E001",
                )
            )
        else:
            errors.append(
                checks.Warning(
                    f"Every user can watch {label} at /{prefix}/.",
                    hint=hint,
                    obj=model,
                    id="watchers.W001",
                )
            )
    return errors
