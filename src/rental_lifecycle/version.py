"""Version metadata for the rental lifecycle package."""

__app_name__ = "Car Rental Lifecycle"
__version__ = "1.0.0"
__company__ = "BMW Rentals"
