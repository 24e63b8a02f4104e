"""
StageLink Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the database.
How:   Stateless singletons. Each call receives the request's AsyncSession
       and the requester Profile explicitly; nothing is cached between calls.

Service Inventory:
    - authorization:      policy table and the authorize() gate
    - identity_service:   accounts, passwords, bearer sessions
    - profile_service:    profiles and search
    - media_service:      media references
    - venue_service:      venue map
    - job_service:        jobs, applications, group applications
    - group_service:      groups and membership
    - message_service:    messages and conversation aggregation
"""
