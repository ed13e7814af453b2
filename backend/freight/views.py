from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from .models import TransportRequest, CarrierRequest, PackageTypePreset, Quote
from .permissions import IsCustomer, IsDispatcher
from .serializers import (
    TransportRequestSerializer,
    TransportRequestCreateSerializer,
    PackageTypePresetSerializer,
    QuoteSerializer,
    CarrierOfferSerializer,
    OfferDetailSerializer,
    OfferSubmissionSerializer,
)

# Import from services layer
from services.pricing import PriceCalculator
from services.matching import start_matching
from services.lifecycle import (
    accept_quote,
    decline_quote,
    submit_offer,
    accept_offer,
    reject_offer,
)

# Refused offer transitions: which HTTP status each error code maps to
OFFER_ERROR_STATUS = {
    'offer_not_available': status.HTTP_400_BAD_REQUEST,
    'transport_request_closed': status.HTTP_409_CONFLICT,
}

# Carrier requests that carry a price; bare invitations stay hidden from the customer
OFFER_STATUSES = ('offered', 'won', 'rejected')


def _offer_failure(result):
    return Response(
        {
            'success': False,
            'error': result.error_code,
            'message': result.message,
        },
        status=OFFER_ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST)
    )


def _get_customer_request(request, request_id):
    try:
        return TransportRequest.objects.get(id=request_id, customer=request.user)
    except TransportRequest.DoesNotExist:
        return None


def _not_found(what):
    return Response({'error': f'{what} not found'}, status=status.HTTP_404_NOT_FOUND)


# ==================== Customer APIs ====================

@api_view(['GET'])
@permission_classes([IsCustomer])
def list_package_presets(request):
    """Package types with default dimensions for the packages form"""
    presets = PackageTypePreset.objects.all()
    return Response(PackageTypePresetSerializer(presets, many=True).data)


@api_view(['POST'])
@permission_classes([IsCustomer])
def create_transport_request(request):
    """
    Create a new transport request and price it.

    The request is always saved; if pricing fails the response carries the
    reasons in 'pricing_errors' and no quote.
    """
    serializer = TransportRequestCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    transport_request = serializer.save(customer=request.user)

    calculator = PriceCalculator(transport_request)
    quote = calculator.calculate()

    return Response({
        'transport_request': TransportRequestSerializer(transport_request).data,
        'quote': QuoteSerializer(quote).data if quote else None,
        'pricing_errors': calculator.errors,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsCustomer])
def get_quote(request, request_id):
    """Quote for one of the customer's transport requests"""
    transport_request = _get_customer_request(request, request_id)
    if transport_request is None:
        return _not_found('Transport request')

    try:
        quote = transport_request.quote
    except Quote.DoesNotExist:
        return _not_found('Quote')

    return Response(QuoteSerializer(quote).data)


@api_view(['POST'])
@permission_classes([IsCustomer])
def accept_quote_view(request, request_id):
    """Accept the quote and start looking for carriers"""
    transport_request = _get_customer_request(request, request_id)
    if transport_request is None:
        return _not_found('Transport request')

    try:
        quote = transport_request.quote
    except Quote.DoesNotExist:
        return _not_found('Quote')

    if not accept_quote(quote):
        return Response(
            {
                'success': False,
                'error': 'quote_not_pending',
                'message': f'Quote is {quote.effective_status} and can no longer be accepted.',
            },
            status=status.HTTP_400_BAD_REQUEST
        )

    matching_started = start_matching(transport_request)
    transport_request.refresh_from_db()

    return Response({
        'success': True,
        'quote': QuoteSerializer(quote).data,
        'transport_request': TransportRequestSerializer(transport_request).data,
        'matching_started': matching_started,
        'message': 'Quote accepted. We are looking for carriers.',
    })


@api_view(['POST'])
@permission_classes([IsCustomer])
def decline_quote_view(request, request_id):
    transport_request = _get_customer_request(request, request_id)
    if transport_request is None:
        return _not_found('Transport request')

    try:
        quote = transport_request.quote
    except Quote.DoesNotExist:
        return _not_found('Quote')

    if not decline_quote(quote):
        return Response(
            {
                'success': False,
                'error': 'quote_not_pending',
                'message': f'Quote is {quote.effective_status} and can no longer be declined.',
            },
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'success': True,
        'quote': QuoteSerializer(quote).data,
        'message': 'Quote declined.',
    })


@api_view(['GET'])
@permission_classes([IsCustomer])
def list_offers(request, request_id):
    """Priced carrier offers of a transport request, cheapest first"""
    transport_request = _get_customer_request(request, request_id)
    if transport_request is None:
        return _not_found('Transport request')

    carrier_requests = (
        transport_request.carrier_requests
        .filter(status__in=OFFER_STATUSES)
        .select_related('carrier')
        .order_by('offered_price', 'id')
    )
    return Response({
        'transport_request_id': transport_request.id,
        'status': transport_request.status,
        'offers': CarrierOfferSerializer(carrier_requests, many=True).data,
    })


def _get_customer_offer(request, request_id, offer_id):
    try:
        return CarrierRequest.objects.select_related('carrier').get(
            id=offer_id,
            transport_request_id=request_id,
            transport_request__customer=request.user,
        )
    except CarrierRequest.DoesNotExist:
        return None


@api_view(['POST'])
@permission_classes([IsCustomer])
def accept_offer_view(request, request_id, offer_id):
    """Award the transport request to one carrier's offer"""
    offer = _get_customer_offer(request, request_id, offer_id)
    if offer is None:
        return _not_found('Offer')

    result = accept_offer(offer)
    if not result.success:
        return _offer_failure(result)

    return Response({
        'success': True,
        'offer': CarrierOfferSerializer(result.carrier_request).data,
        'rejected_offer_ids': result.extra['rejected_ids'],
        'message': result.message,
    })


@api_view(['POST'])
@permission_classes([IsCustomer])
def reject_offer_view(request, request_id, offer_id):
    offer = _get_customer_offer(request, request_id, offer_id)
    if offer is None:
        return _not_found('Offer')

    result = reject_offer(offer)
    if not result.success:
        return _offer_failure(result)

    return Response({
        'success': True,
        'offer': CarrierOfferSerializer(result.carrier_request).data,
        'message': result.message,
    })


# ==================== Dispatcher APIs ====================

@api_view(['POST'])
@permission_classes([IsDispatcher])
def price_transport_request(request, request_id):
    """(Re)calculate the quote for a transport request without one"""
    try:
        transport_request = TransportRequest.objects.get(id=request_id)
    except TransportRequest.DoesNotExist:
        return _not_found('Transport request')

    if Quote.objects.filter(transport_request=transport_request).exists():
        return Response(
            {'error': 'quote_exists', 'message': 'This transport request already has a quote.'},
            status=status.HTTP_400_BAD_REQUEST
        )

    calculator = PriceCalculator(transport_request)
    quote = calculator.calculate()
    if quote is None:
        return Response(
            {'error': 'pricing_failed', 'errors': calculator.errors},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response(QuoteSerializer(quote).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsDispatcher])
def run_matching(request, request_id):
    """Queue carrier matching for a transport request"""
    try:
        transport_request = TransportRequest.objects.get(id=request_id)
    except TransportRequest.DoesNotExist:
        return _not_found('Transport request')

    if not start_matching(transport_request):
        return Response(
            {
                'error': 'not_matchable',
                'message': f'Transport request is {transport_request.status} and cannot be matched.',
            },
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response(
        {
            'success': True,
            'transport_request_id': transport_request.id,
            'status': transport_request.status,
            'matching_stage': transport_request.matching_stage,
        },
        status=status.HTTP_202_ACCEPTED
    )


# ==================== Public carrier offer APIs ====================

def _get_offer_by_token(token):
    try:
        return CarrierRequest.objects.select_related('carrier', 'transport_request').get(access_token=token)
    except CarrierRequest.DoesNotExist:
        return None


@api_view(['GET'])
@permission_classes([AllowAny])
def offer_detail(request, token):
    """Invitation details behind the link emailed to the carrier"""
    offer = _get_offer_by_token(token)
    if offer is None:
        return _not_found('Invitation')

    return Response(OfferDetailSerializer(offer).data)


@api_view(['POST'])
@permission_classes([AllowAny])
def submit_offer_view(request, token):
    """
    Carrier submits (or revises) its offer

    POST Body:
    {
        "offered_price": "450.00",
        "offered_delivery_date": "2026-05-04T10:00:00Z",
        "vehicle_type": "Sprinter",
        "notes": "Tail lift available"
    }
    """
    offer = _get_offer_by_token(token)
    if offer is None:
        return _not_found('Invitation')

    serializer = OfferSubmissionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = submit_offer(offer, **serializer.validated_data)
    if not result.success:
        return _offer_failure(result)

    return Response({
        'success': True,
        'offer': OfferDetailSerializer(result.carrier_request).data,
        'message': result.message,
    })
