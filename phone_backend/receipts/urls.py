from django.urls import path

from receipts.views import OrderReceiptView, ReceiptDetailView, ReceiptListCreateView

urlpatterns = [
    path("", ReceiptListCreateView.as_view(), name="receipt-list"),
    path("<uuid:receipt_id>/", ReceiptDetailView.as_view(), name="receipt-detail"),
    path("order/<uuid:order_id>/", OrderReceiptView.as_view(), name="receipt-for-order"),
]
