"""
                Bistro Boss

Restaurant management backend: user accounts, menu, reviews, carts and
Stripe payments over MongoDB.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
