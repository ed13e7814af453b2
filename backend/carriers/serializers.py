from rest_framework import serializers
from carriers.models import Carrier


class CarrierBasicSerializer(serializers.ModelSerializer):
    """
    Lite version of carrier info shown to customers next to an offer.
    """

    class Meta:
        model = Carrier
        fields = [
            "id",
            "company_name",
            "country",
            "language",
            "rating_communication",
            "rating_punctuality",
        ]
