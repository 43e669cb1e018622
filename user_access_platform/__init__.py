"""User sign-up, sign-in and account management API."""
