from django.urls import path

from . import views as my_views


urlpatterns = [
    path('payments/stripe/payment-intent/', my_views.CreateStripePaymentIntentAPIView.as_view(),
         name='stripe-payment-intent'),
    path('payments/stripe/confirm/', my_views.ConfirmStripePaymentAPIView.as_view(), name='stripe-confirm'),
    path('payments/esewa/initiate/', my_views.InitiateEsewaPaymentAPIView.as_view(), name='esewa-initiate'),
    path('payments/esewa/verify/', my_views.VerifyEsewaPaymentAPIView.as_view(), name='esewa-verify'),
    path('payments/transactions/', my_views.ListTransactionsAPIView.as_view(), name='transaction-list'),
    path('payments/transactions/<int:id>/', my_views.RetrieveTransactionAPIView.as_view(), name='transaction-detail'),
]
