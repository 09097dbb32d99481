"""
# Data Models Package

Pydantic v2 models for every campushub entity, organized by domain:

- **`user_models`** / **`auth_models`**: accounts, roles, sign-up/sign-in and password reset.
- **`organization_models`**: student organizations and their advisers.
- **`officer_models`**: officer terms and the recognised officer positions.
- **`school_event_models`**: school events and listing filters.
- **`calendar_entry_models`**: users' bookmarked events.
- **`event_notification_models`**: SMS notifications sent for events.
- **`report_models`**: file-backed organization reports and their approval workflow.
- **`otp_models`**: one-time password records.
- **`audit_log_models`**: audit trail entries and the allowed action types.

Each domain follows the same split:
- `*Document`: the shape persisted to MongoDB.
- `*Request`: input validation for an endpoint.
- `*Response`: output serialization (never exposes secrets such as password hashes).
"""
