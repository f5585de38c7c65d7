from rest_framework import views as drf_views, generics, status
from rest_framework.response import Response
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from drf_yasg.utils import swagger_auto_schema

from accounts.permissions import IsClient
from projects.models import Project
from . import serializers as my_serializers
from .models import Transaction
from .services import SettlementService, TransactionQueryService


class StartPaymentClientAPIView(drf_views.APIView):
    """
    Starts a payment for the project's budget with the gateway in ``provider``
    (stripe: returns a Payment Intent client secret, esewa: returns the form fields).
    """
    permission_classes = [IsAuthenticated, IsClient]
    authentication_classes = [JWTAuthentication]
    provider = None

    @swagger_auto_schema(
        operation_summary="Start a project payment",
        request_body=my_serializers.StartPaymentSerializer,
    )
    def post(self, request):
        serializer = my_serializers.StartPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        project = get_object_or_404(Project, id=serializer.validated_data['project_id'])

        result = SettlementService().start_payment(user=request.user, project=project, provider_name=self.provider)
        return Response({
            'success': True,
            'message': "Payment initiated.",
            'payment': result,
        }, status=status.HTTP_201_CREATED)


class CreateStripePaymentIntentAPIView(StartPaymentClientAPIView):
    provider = Transaction.METHOD_STRIPE


class InitiateEsewaPaymentAPIView(StartPaymentClientAPIView):
    provider = Transaction.METHOD_ESEWA


class SettlementResponseMixin:

    def settle(self, request, *, project_id, reference, method):
        project = get_object_or_404(Project, id=project_id)
        record, created = SettlementService().settle(
            user=request.user, project=project, reference=reference, method=method,
        )
        return Response({
            'success': True,
            'message': "Payment recorded successfully." if created else "Payment already recorded.",
            'transaction': my_serializers.TransactionSerializer(record).data,
        }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


class ConfirmStripePaymentAPIView(SettlementResponseMixin, drf_views.APIView):
    permission_classes = [IsAuthenticated, IsClient]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(
        operation_summary="Record a confirmed Stripe payment for a project",
        request_body=my_serializers.ConfirmStripePaymentSerializer,
        responses={201: my_serializers.TransactionSerializer, 200: my_serializers.TransactionSerializer}
    )
    def post(self, request):
        serializer = my_serializers.ConfirmStripePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return self.settle(
            request,
            project_id=data['project_id'],
            reference=data['payment_intent_id'],
            method=Transaction.METHOD_STRIPE,
        )


class VerifyEsewaPaymentAPIView(SettlementResponseMixin, drf_views.APIView):
    permission_classes = [IsAuthenticated, IsClient]
    authentication_classes = [JWTAuthentication]

    @swagger_auto_schema(
        operation_summary="Verify an eSewa payment and record it for a project",
        request_body=my_serializers.VerifyEsewaPaymentSerializer,
        responses={201: my_serializers.TransactionSerializer, 200: my_serializers.TransactionSerializer}
    )
    def post(self, request):
        serializer = my_serializers.VerifyEsewaPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return self.settle(
            request,
            project_id=data['project_id'],
            reference=data['rid'],
            method=Transaction.METHOD_ESEWA,
        )


class ListTransactionsAPIView(generics.ListAPIView):
    """
    Transactions where the current user is the payer or the payee; administrators see all.
    """
    serializer_class = my_serializers.TransactionSerializer
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def get_queryset(self):
        return TransactionQueryService.visible_to(self.request.user)


class RetrieveTransactionAPIView(drf_views.APIView):
    permission_classes = [IsAuthenticated]
    authentication_classes = [JWTAuthentication]

    def get(self, request, id):
        record = TransactionQueryService.get_for(request.user, id)
        return Response({
            'success': True,
            'transaction': my_serializers.TransactionSerializer(record).data,
        }, status=status.HTTP_200_OK)
