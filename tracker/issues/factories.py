import factory

from tracker.users.factories import UserFactory

from .models import Issue


class IssueFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Issue

    title = factory.Sequence(lambda n: f"Issue {n}")
    description = factory.Faker("paragraph")
    author = factory.SubFactory(UserFactory)
    is_private = False
