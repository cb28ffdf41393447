import factory

from .models import Document


class DocumentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Document

    title = factory.Sequence(lambda n: f"Doc {n}")
    body = factory.Faker("paragraph")
