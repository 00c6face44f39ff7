"""
Payments app package for the Encore crowdfunding backend.

This package owns the checkout-to-fulfillment pipeline: processing fee
maths, Stripe Checkout session creation, the signed Stripe webhook, the
contribution ledger that keeps project and tier counters consistent,
and the post-payment email notifications.  See payments/ledger.py for
the ordering and idempotency rules.
"""
