from django.urls import path

from payments.views import PaymentIntentView, StripeWebhookView

urlpatterns = [
    path("intent/", PaymentIntentView.as_view(), name="payment-intent"),
    path("stripe/webhook/", StripeWebhookView.as_view(), name="stripe-webhook"),
]
