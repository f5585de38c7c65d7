from decimal import Decimal
from unittest.mock import patch

import pytest
from django.urls import reverse

from conftest import ProjectFactory
from payments.models import Transaction
from payments.providers.esewa import EsewaProvider
from payments.providers.stripe import StripeProvider


@pytest.mark.django_db
class TestSettlementEndpoints:

    @patch.object(StripeProvider, 'verify', return_value=True)
    def test_stripe_confirm_is_idempotent(self, verify, auth_client, project):
        api = auth_client(project.client)
        payload = {'project_id': project.pk, 'payment_intent_id': 'pi_live'}

        first = api.post(reverse('stripe-confirm'), payload, format='json')
        second = api.post(reverse('stripe-confirm'), payload, format='json')

        assert first.status_code == 201
        assert first.data['transaction']['freelancer_share'] == '900.00'
        assert first.data['transaction']['platform_fee'] == '100.00'
        assert second.status_code == 200
        assert second.data['message'] == "Payment already recorded."
        assert second.data['transaction']['id'] == first.data['transaction']['id']
        assert Transaction.objects.count() == 1

    @patch.object(EsewaProvider, 'verify', return_value=False)
    def test_esewa_unverified(self, verify, auth_client, project):
        response = auth_client(project.client).post(reverse('esewa-verify'), {
            'project_id': project.pk,
            'rid': 'bogus',
        }, format='json')

        assert response.status_code == 400
        assert response.data == {'success': False, 'message': "Payment could not be verified."}

    def test_freelancer_cannot_confirm(self, auth_client, project):
        response = auth_client(project.freelancer).post(reverse('stripe-confirm'), {
            'project_id': project.pk,
            'payment_intent_id': 'pi_x',
        }, format='json')

        assert response.status_code == 403

    def test_other_client_cannot_confirm(self, auth_client, project, client_user):
        response = auth_client(client_user).post(reverse('stripe-confirm'), {
            'project_id': project.pk,
            'payment_intent_id': 'pi_x',
        }, format='json')

        assert response.status_code == 403
        assert response.data['message'] == "Only the project client can confirm a payment."

    def test_esewa_initiate(self, auth_client, project):
        response = auth_client(project.client).post(reverse('esewa-initiate'), {'project_id': project.pk},
                                                    format='json')

        assert response.status_code == 201
        assert response.data['payment']['data']['amt'] == '1000.00'


@pytest.mark.django_db
class TestTransactionEndpoints:

    @patch.object(StripeProvider, 'verify', return_value=True)
    def test_visibility(self, verify, auth_client, project, admin_user, other_freelancer):
        auth_client(project.client).post(reverse('stripe-confirm'), {
            'project_id': project.pk, 'payment_intent_id': 'pi_1',
        }, format='json')
        other = ProjectFactory()
        auth_client(other.client).post(reverse('stripe-confirm'), {
            'project_id': other.pk, 'payment_intent_id': 'pi_2',
        }, format='json')
        mine = Transaction.objects.get(project=project)

        assert len(auth_client(project.freelancer).get(reverse('transaction-list')).data) == 1
        assert len(auth_client(admin_user).get(reverse('transaction-list')).data) == 2
        assert auth_client(other_freelancer).get(reverse('transaction-list')).data == []

        detail = auth_client(project.client).get(reverse('transaction-detail', kwargs={'id': mine.pk}))
        assert detail.data['transaction']['amount'] == '1000.00'

        hidden = auth_client(other_freelancer).get(reverse('transaction-detail', kwargs={'id': mine.pk}))
        assert hidden.status_code == 404
        assert Decimal(detail.data['transaction']['freelancer_share']) == Decimal('900.00')
