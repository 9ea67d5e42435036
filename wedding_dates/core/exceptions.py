"""
Domain exceptions raised by the availability services
"""


class AvailabilityError(Exception):
    """Base class for errors the API layer turns into error responses"""
    error_code = "availability_error"

    def __init__(self, message, status_code=400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class StoreUnavailable(AvailabilityError):
    """The backing store could not be reached or rejected the operation"""
    error_code = "store_unavailable"

    def __init__(self, message="Response store is unavailable. Please try again."):
        super().__init__(message, status_code=503)


class InconsistentGuestMode(AvailabilityError):
    """A guest's responses disagree on which response mode they use"""
    error_code = "inconsistent_guest_mode"

    def __init__(self, first_name, last_name, modes):
        self.first_name = first_name
        self.last_name = last_name
        self.modes = sorted(modes)
        super().__init__(
            f"Responses for {first_name} {last_name} mix response modes: {', '.join(self.modes)}",
            status_code=409,
        )


class GuestIdentityRequired(AvailabilityError):
    error_code = "guest_identity_required"

    def __init__(self, message="First and last name are required"):
        super().__init__(message, status_code=400)


class AdminRequired(AvailabilityError):
    error_code = "admin_required"

    def __init__(self, message="Administrator access required"):
        super().__init__(message, status_code=403)
