"""bizdesk.integrations — backend collaborator gateway.

All outbound HTTP calls to the business backend go through
``backend_gateway.BackendGateway``, never via bare ``requests`` calls in
services or blueprints. Every call is:
  - Authenticated (bearer token forwarded from the incoming request)
  - Timed and logged
  - Unwrapped from the backend's ``{"data": ...}`` envelope
  - Raised as ``CollaboratorError`` on failure, never retried

Entity clients (``UsersApi``, ``ProjectsApi``, ``ServicesApi``,
``NotificationsApi``) expose the uniform get_all / get_by_id / create /
update / delete contract on top of the gateway.
"""
