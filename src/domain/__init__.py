"""
Domain layer for contact-form business logic.

This layer contains:
- Data models (immutable submission, composed message, delivery result)
- Validation (honeypot gate, required fields)
- Message composition (subject and dual-format body)
- The request pipeline (ContactProcessor)
"""
