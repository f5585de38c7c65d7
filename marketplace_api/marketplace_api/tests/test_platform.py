from unittest.mock import patch

import pytest
from django.urls import reverse
from rest_framework import serializers
from rest_framework.permissions import AllowAny
from rest_framework.test import APIRequestFactory
from rest_framework.views import APIView

from marketplace_api.exceptions import Conflict, error_message


class ExplodingView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        raise RuntimeError("boom")


class ConflictView(ExplodingView):

    def get(self, request):
        raise Conflict("Already taken.")


class TestErrorMessage:

    @pytest.mark.parametrize('detail, expected', [
        ("plain", "plain"),
        (["first", "second"], "first"),
        ({'non_field_errors': ["Passwords do not match."]}, "Passwords do not match."),
        ({'email': ["This field is required."]}, "email: This field is required."),
        ({'detail': "Not found."}, "Not found."),
        ([], ""),
    ])
    def test_flattens_drf_details(self, detail, expected):
        assert error_message(detail) == expected


class TestEnvelopeHandler:

    def test_domain_errors_keep_their_status(self):
        response = ConflictView.as_view()(APIRequestFactory().get('/'))

        assert response.status_code == 400
        assert response.data == {'success': False, 'message': "Already taken."}

    def test_unhandled_errors_become_500(self):
        response = ExplodingView.as_view()(APIRequestFactory().get('/'))

        assert response.status_code == 500
        assert response.data == {'success': False, 'message': "An unexpected error occurred."}

    def test_validation_errors_include_field_errors(self):
        class AmountSerializer(serializers.Serializer):
            amount = serializers.IntegerField()

        class PayloadView(ExplodingView):
            def get(self, request):
                AmountSerializer(data={}).is_valid(raise_exception=True)

        response = PayloadView.as_view()(APIRequestFactory().get('/'))

        assert response.status_code == 400
        assert response.data['message'] == "amount: This field is required."
        assert response.data['errors'] == {'amount': ["This field is required."]}


@pytest.mark.django_db
class TestAuditMiddleware:

    def test_logs_actor_request_and_forwarded_ip(self, auth_client, freelancer):
        with patch('marketplace_api.middleware.logger') as audit:
            auth_client(freelancer).get(reverse('notification-list'), HTTP_X_FORWARDED_FOR='203.0.113.9, 10.0.0.1')

        line = audit.info.call_args.args[0]
        assert freelancer.email in line
        assert "GET /notifications/ -> 200" in line
        assert "IP: 203.0.113.9" in line

    def test_anonymous_requests(self, api_client):
        with patch('marketplace_api.middleware.logger') as audit:
            api_client.get(reverse('notification-list'))

        assert "Anonymous" in audit.info.call_args.args[0]
        assert "-> 401" in audit.info.call_args.args[0]
