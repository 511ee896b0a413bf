import logging

from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    ShopSerializer,
    ShopCreateSerializer,
    StaffSerializer,
    StaffCreateSerializer,
)
from .permissions import IsShopOwner
from .services import (
    register_user,
    authenticate_user,
    create_shop,
    get_owned_shop,
    update_shop,
    create_staff,
    kick_staff,
    list_staff,
    DuplicateEmailError,
    InvalidCredentialsError,
    InactiveAccountError,
    ShopNotFoundError,
    ShopAlreadyExistsError,
    StaffNotFoundError,
    CannotKickOwnerError,
    NotShopOwnerError,
)

logger = logging.getLogger(__name__)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token to invalidate")


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new shop owner and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new owner account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except DuplicateEmailError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'message': 'Registration successful. Set up your shop to continue.',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError:
        return Response({
            'error': 'Invalid credentials'
        }, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError:
        return Response({
            'error': 'Account is deactivated'
        }, status=status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    })


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout. The refresh token, if sent, must be valid.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout; validates the refresh token when one is provided."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError:
            return Response({
                'error': 'Invalid token'
            }, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Logout successful'
    })


@extend_schema(
    methods=['GET'],
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@extend_schema(
    methods=['PATCH'],
    request=UserSerializer,
    responses={200: UserSerializer, 400: ErrorResponseSerializer},
    description="Update the current user's profile (full_name, phone, avatar_url).",
    tags=['auth'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def current_user(request):
    """Get or update the current user's profile."""
    if request.method == 'GET':
        return Response(UserSerializer(request.user).data)

    serializer = UserSerializer(request.user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


@extend_schema(
    methods=['GET'],
    responses={200: ShopSerializer, 404: ErrorResponseSerializer},
    description="Get the shop the current user works in.",
    tags=['shop'],
)
@extend_schema(
    methods=['POST'],
    request=ShopCreateSerializer,
    responses={201: ShopSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
    description="Onboarding: create the owner's shop.",
    tags=['shop'],
)
@extend_schema(
    methods=['PATCH'],
    request=ShopSerializer,
    responses={200: ShopSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Update the owner's shop profile.",
    tags=['shop'],
)
@api_view(['GET', 'POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def shop(request):
    """Read, create (onboarding) or update the user's shop."""
    user = request.user

    if request.method == 'GET':
        if user.shop is None:
            return Response(
                {'error': 'You do not belong to a shop yet'},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(ShopSerializer(user.shop).data)

    if request.method == 'POST':
        input_serializer = ShopCreateSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        try:
            new_shop = create_shop(owner=user, **input_serializer.validated_data)
        except NotShopOwnerError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except ShopAlreadyExistsError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ShopSerializer(new_shop).data, status=status.HTTP_201_CREATED)

    input_serializer = ShopSerializer(data=request.data, partial=True)
    input_serializer.is_valid(raise_exception=True)
    try:
        get_owned_shop(user)
    except ShopNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    updated = update_shop(owner=user, **input_serializer.validated_data)
    return Response(ShopSerializer(updated).data)


@extend_schema(
    methods=['GET'],
    responses={200: StaffSerializer(many=True)},
    description="List the cashiers of the owner's shop.",
    tags=['staff'],
)
@extend_schema(
    methods=['POST'],
    request=StaffCreateSerializer,
    responses={201: StaffSerializer, 400: ErrorResponseSerializer},
    description="Create a cashier account in the owner's shop.",
    tags=['staff'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsShopOwner])
def staff_collection(request):
    """List or create staff members."""
    if request.method == 'GET':
        return Response(StaffSerializer(list_staff(request.user), many=True).data)

    input_serializer = StaffCreateSerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)

    try:
        staff = create_staff(owner=request.user, **input_serializer.validated_data)
    except DuplicateEmailError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except ShopNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(StaffSerializer(staff).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={200: MessageResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
    description="Remove a cashier from the owner's shop.",
    tags=['staff'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsShopOwner])
def kick(request, staff_id):
    """Detach a staff member from the shop."""
    try:
        kick_staff(owner=request.user, staff_id=staff_id)
    except CannotKickOwnerError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except (StaffNotFoundError, ShopNotFoundError) as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({'message': 'Staff member removed from the shop'})
