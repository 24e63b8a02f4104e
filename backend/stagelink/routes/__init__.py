"""
StageLink Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.
How:   One module per resource; every module exposes `router`.

Route Inventory:
    - auth.py:      /api/auth      sign-up, sign-in, sign-out, me
    - profiles.py:  /api/profiles  read, edit own, search
    - media.py:     /api/media     per-profile media references
    - venues.py:    /api/venues    venue map
    - jobs.py:      /api/jobs      gigs, applications, group applications
    - groups.py:    /api/groups    groups and membership
    - messages.py:  /api/messages  messages and conversations
    - health.py:    /health        service health check

Design Principle:
    Routes are THIN. They resolve the requester (stagelink.security), call
    a service, and pick the status code. Validation, authorization and
    queries live in the services.
"""
