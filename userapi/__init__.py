"""User management API: accounts, credentials and admin/self access rules."""
