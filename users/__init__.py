"""
Users app package for the Encore crowdfunding backend.

Extends Django's built-in user with a `Profile` carrying the display
name and platform role (fan, artist, admin) used by the payment
pipeline to address backers and find platform admins.
"""
