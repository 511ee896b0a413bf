"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    pass


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    pass


class DuplicateEmailError(UserRegistrationError):
    """Raised when the email is already taken."""
    pass


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    pass


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    pass


class ShopNotFoundError(AccountsServiceError):
    """Raised when the owner has not set up a shop yet."""
    pass


class ShopAlreadyExistsError(AccountsServiceError):
    """Raised when an owner tries to onboard a second shop."""
    pass


class StaffNotFoundError(AccountsServiceError):
    """Raised when a staff member does not exist in the owner's shop."""
    pass


class CannotKickOwnerError(AccountsServiceError):
    """Raised when an owner tries to remove themselves from the shop."""
    pass


class NotShopOwnerError(AccountsServiceError):
    """Raised when a non-owner attempts an owner-only operation."""
    pass
