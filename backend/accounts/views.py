"""
Account endpoints for the freight API.

Customers sign themselves up; dispatcher and admin accounts are created in the
Django admin and only log in here. Every successful sign-up or login answers
with the user profile and a fresh JWT pair.
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import RegisterSerializer, LoginSerializer, UserSerializer

logger = logging.getLogger(__name__)


def _session_response(user, message, status_code):
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        },
    }, status=status_code)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def register_customer(request):
    """
    Sign up a shipper company as a customer.

    POST Body:
    {
        "username": "acme_logistics",
        "email": "ops@acme.example",
        "password": "password123",
        "company_name": "ACME GmbH",
        "phone_number": "+49301234567",
        "locale": "de"
    }
    """
    serializer = RegisterSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    customer = serializer.save()
    logger.info("Customer %s registered for %s", customer.id, customer.company_name)
    return _session_response(customer, 'Customer account created', status.HTTP_201_CREATED)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login(request):
    """Exchange username and password for a JWT pair; works for every role."""
    serializer = LoginSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning("Failed login for username %r", request.data.get('username'))
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = serializer.validated_data
    logger.info("User %s logged in as %s", user.id, user.role)
    return _session_response(user, 'Login successful', status.HTTP_200_OK)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def refresh_token(request):
    """Issue a new access token for a refresh token (``{"refresh": "..."}``)."""
    serializer = TokenRefreshSerializer(data=request.data)
    try:
        serializer.is_valid(raise_exception=True)
    except TokenError:
        return Response(
            {'error': 'Invalid or expired refresh token'},
            status=status.HTTP_401_UNAUTHORIZED
        )

    return Response(serializer.validated_data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """Profile of the authenticated user, so clients can route by role."""
    return Response(UserSerializer(request.user).data)
