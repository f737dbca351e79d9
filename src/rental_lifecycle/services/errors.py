"""Custom service layer errors."""

from __future__ import annotations


class ServiceError(Exception):
    """Base error for service-layer failures."""

    code = "service_error"
    default_message = "The request could not be completed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Raised when a business rule validation fails."""

    code = "validation_error"
    default_message = "Invalid data."


class NotFoundError(ServiceError):
    """Raised when an entity is not found."""

    code = "not_found"
    default_message = "Record not found."


class InvalidDateRangeError(ValidationError):
    code = "invalid_date_range"
    default_message = "Return date must be after the pick-up date."


class MixedTimezoneError(ValidationError):
    code = "mixed_timezones"
    default_message = "Dates must be either all timezone-aware or all naive."


class InvalidPriceError(ValidationError):
    code = "invalid_price"
    default_message = "Price per day must be a non-negative amount."


class CarInactiveError(ValidationError):
    code = "car_inactive"
    default_message = "Car is not active. Cannot rent now."


class DiscountError(ValidationError):
    """Base error for discount codes that cannot be applied to a booking."""

    code = "discount_error"
    default_message = "Discount code cannot be applied."


class DiscountExpiredError(DiscountError):
    code = "discount_expired"
    default_message = "This discount code has expired."


class DiscountNotYetValidError(DiscountError):
    code = "discount_not_yet_valid"
    default_message = "This discount code is not valid yet."


class DiscountInvalidError(DiscountError):
    code = "discount_invalid"
    default_message = "Invalid discount code."


class DiscountAlreadyUsedError(DiscountError):
    code = "discount_already_used"
    default_message = "This discount code can only be used once per customer."


class DuplicateDiscountCodeError(ValidationError):
    code = "duplicate_discount_code"
    default_message = "The code already exists. Please choose a different code."


class TransitionError(ServiceError):
    """Base error for rejected rental status changes."""

    code = "transition_error"
    default_message = "Status change not allowed."


class IllegalTransitionError(TransitionError):
    code = "illegal_transition"
    default_message = "This status change is not allowed."


class ActorNotPermittedError(TransitionError):
    code = "actor_not_permitted"
    default_message = "You are not allowed to perform this status change."


class ReviewError(ServiceError):
    """Base error for the review flow guards."""

    code = "review_error"


class AlreadyReviewedError(ReviewError):
    code = "already_reviewed"
    default_message = "This rental has already been reviewed."


class NotReturnedError(ReviewError):
    code = "not_returned"
    default_message = "Only returned rentals can be reviewed."


class StaleRentalError(ServiceError):
    """Raised when a rental changed since it was loaded (optimistic lock)."""

    code = "stale_rental"
    default_message = "The rental was changed by someone else. Reload and try again."
