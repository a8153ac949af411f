"""
Infrastructure Package
======================

Abstraction layers for the external collaborators the marketplace talks to.

Modules:
    - storage: file store for profile pictures, gig media, deliveries and attachments (S3, local)
    - email: mail sender for password reset codes (SMTP, mock)
    - notifications: realtime fan-out of order events (Django Channels, mock)

Services receive these through ``infrastructure.container`` so tests can swap
in the mock implementations.
"""
