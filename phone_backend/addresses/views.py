# addresses/views.py

"""
ADDRESS BOOK

Owner-only CRUD. Other users' addresses are invisible (404, not 403),
so existence of foreign ids is never confirmed.
"""

import logging

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from addresses.models import Address
from addresses.serializers import AddressSerializer

logger = logging.getLogger(__name__)


class AddressViewSet(viewsets.ModelViewSet):
    serializer_class = AddressSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return Address.objects.filter(user=self.request.user)

    def perform_create(self, serializer):
        address = serializer.save(user=self.request.user)
        logger.info(
            "Address created",
            extra={"address_id": str(address.id), "user_id": str(self.request.user.id)},
        )
