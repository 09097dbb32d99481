"""
# campushub

A **FastAPI-based backend** for managing a school's student organizations: accounts and roles,
organizations and their officers, school events and personal calendars, SMS event notifications,
organization reports with an approval workflow, OTP password reset and a full audit trail.

## Architecture Overview

```
┌──────────────┐  ┌──────────────┐  ┌──────────────┐
│   FastAPI    │  │   Routers    │  │  Middleware  │
│  (Core App)  │◄─┤ (JWT roles)  │◄─┤ (CORS, Logs) │
└──────┬───────┘  └──────────────┘  └──────────────┘
       │
       ├──► Services Layer (business rules, audit logging)
       ├──► Models Layer (Pydantic v2 validation)
       └──► Database Layer (Motor / MongoDB)
```

## Key Technologies

- **FastAPI**: async web framework with automatic OpenAPI documentation
- **Motor**: async MongoDB driver
- **Pydantic v2**: request validation and settings
- **python-jose** / **bcrypt**: JWT issuance and password hashing
- **httpx** / **aiosmtplib**: SMS gateway and SMTP delivery

## Package Layout

- `config`: environment-driven settings
- `database`: connection lifecycle and index creation
- `models`: documents, requests and responses per domain
- `services`: one service singleton per domain
- `routes`: HTTP routers and the role-based auth dependencies
- `utils`: exceptions, responses, query parsing, security and logging helpers
"""
