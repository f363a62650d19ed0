"""
                        Services Module

Business logic behind the HTTP routes.

Services:
    - payment: Stripe payment intents (mock processor in development)
    - stats: admin dashboard counters and revenue
"""
