"""Campus CRUD API.

Role-gated REST endpoints over menu item reviews, help requests and
student organizations.
"""

__version__ = "0.1.0"
