from shopping_trip.auth.sign_in import attempt_sign_in

__all__ = [
    'attempt_sign_in',
]
