"""
postguard - role-based authorization for a blog.

Roles are granted through RoleStore, posts are managed by PostService,
and every protected operation goes through AuthorizationGateway first.
"""

__version__ = "0.1.0"
