"""
Shared pytest fixtures and factory_boy factories.

Run the suite from the repository root:

    pytest
    pytest marketplace_api/jobs -v
"""
from decimal import Decimal

import factory
import pytest
from factory.django import DjangoModelFactory
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken


class UserFactory(DjangoModelFactory):
    """Factory for CustomUser model."""

    class Meta:
        model = 'accounts.CustomUser'
        django_get_or_create = ('email',)
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    role = 'freelancer'
    password = factory.PostGenerationMethodCall('set_password', 'testpass123')
    is_active = True

    @factory.post_generation
    def persist_password(obj, create, extracted, **kwargs):
        if create:
            obj.save()


class FreelancerFactory(UserFactory):
    role = 'freelancer'
    skills = factory.LazyFunction(lambda: ['python', 'django'])


class ClientFactory(UserFactory):
    role = 'client'


class AdminFactory(UserFactory):
    role = 'admin'
    is_staff = True


class JobFactory(DjangoModelFactory):
    class Meta:
        model = 'jobs.Job'

    created_by = factory.SubFactory(ClientFactory)
    title = factory.Sequence(lambda n: f"Job {n}")
    description = factory.Faker('paragraph')
    budget = Decimal('1000.00')
    skills_required = factory.LazyFunction(lambda: ['python'])
    category = 'web-development'
    job_type = 'contract'
    experience_level = 'mid-level'


class ProposalFactory(DjangoModelFactory):
    class Meta:
        model = 'jobs.Proposal'

    job = factory.SubFactory(JobFactory)
    freelancer = factory.SubFactory(FreelancerFactory)
    proposed_amount = Decimal('900.00')
    proposed_timeline = '2 weeks'
    proposal_message = factory.Faker('sentence')


class ProjectFactory(DjangoModelFactory):
    """
    An in-progress project built straight from a job, bypassing proposal acceptance.
    """

    class Meta:
        model = 'projects.Project'

    job = factory.SubFactory(JobFactory, status='in-progress')
    client = factory.SelfAttribute('job.created_by')
    freelancer = factory.SubFactory(FreelancerFactory)
    job_title = factory.SelfAttribute('job.title')
    job_description = factory.SelfAttribute('job.description')
    job_budget = factory.SelfAttribute('job.budget')
    job_category = factory.SelfAttribute('job.category')
    job_type = factory.SelfAttribute('job.job_type')
    freelancer_name = factory.LazyAttribute(lambda o: o.freelancer.name)
    freelancer_email = factory.LazyAttribute(lambda o: o.freelancer.email)
    client_name = factory.LazyAttribute(lambda o: o.client.name)
    client_email = factory.LazyAttribute(lambda o: o.client.email)


class MilestoneFactory(DjangoModelFactory):
    class Meta:
        model = 'projects.Milestone'

    project = factory.SubFactory(ProjectFactory)
    title = factory.Sequence(lambda n: f"Milestone {n}")
    description = factory.Faker('sentence')
    status = 'pending'


@pytest.fixture
def client_user(db):
    return ClientFactory()


@pytest.fixture
def freelancer(db):
    return FreelancerFactory()


@pytest.fixture
def other_freelancer(db):
    return FreelancerFactory()


@pytest.fixture
def admin_user(db):
    return AdminFactory()


@pytest.fixture
def job(client_user):
    return JobFactory(created_by=client_user)


@pytest.fixture
def project(db):
    return ProjectFactory()


def access_token_for(user):
    return str(RefreshToken.for_user(user).access_token)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client():
    """Returns a callable building an APIClient authenticated as the given user."""
    def make(user):
        api = APIClient()
        api.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token_for(user)}")
        return api
    return make


@pytest.fixture
def channel_layer():
    """The in-memory channel layer, emptied before and after the test."""
    from asgiref.sync import async_to_sync
    from channels.layers import get_channel_layer

    layer = get_channel_layer()
    async_to_sync(layer.flush)()
    yield layer
    async_to_sync(layer.flush)()


@pytest.fixture
def listen(channel_layer):
    """
    Subscribe a fresh channel to a group; returns a callable that pops the next
    pushed message (or None when nothing arrives).
    """
    from asgiref.sync import async_to_sync

    def subscribe(group):
        channel = async_to_sync(channel_layer.new_channel)()
        async_to_sync(channel_layer.group_add)(group, channel)

        def next_message():
            # pushes are delivered synchronously, so an empty queue means nothing was sent
            queue = channel_layer.channels.get(channel)
            if queue is None or queue.empty():
                return None
            return async_to_sync(channel_layer.receive)(channel)

        return next_message

    return subscribe
